# petfoundus/api/pets/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import get_jwt_identity
from marshmallow import ValidationError

from petfoundus.core.security import role_required, ROLE_ADOPTER, ROLE_SHELTER
from .schemas import PetCreateSchema, PetUpdateSchema, PetResponseSchema

# 입양자용 탐색 API (/api/adopters/pets)
pets_bp = Blueprint('pets_bp', __name__)
# 보호소 반려동물 관리 API (/api/shelters/<shelter_id>/pets)
shelter_pets_bp = Blueprint('shelter_pets_bp', __name__)


@pets_bp.route('/all', methods=['GET'])
def list_available_pets():
    """[공개용] 입양 가능한 모든 반려동물 목록."""
    pet_service = current_app.services['pets']
    try:
        pets = pet_service.list_available_pets()
        return jsonify({"success": True, "pets": PetResponseSchema(many=True).dump(pets)}), 200
    except Exception as e:
        logging.error(f"List available pets API error: {e}", exc_info=True)
        return jsonify({"success": False, "error_code": "FETCH_FAILED", "message": "Failed to load pets"}), 500


@pets_bp.route('/match', methods=['POST'])
@role_required(ROLE_ADOPTER)
def match_pets():
    """선호도 기반 스마트 매칭."""
    adopter_id = get_jwt_identity()
    pet_service = current_app.services['pets']
    try:
        pets = pet_service.match_pets(adopter_id)
        if pets is None:
            return jsonify({
                "success": False,
                "needs_preferences": True,
                "message": "All adoption preferences must be completed before using Smart Matching",
            }), 400
        return jsonify({"success": True, "pets": PetResponseSchema(many=True).dump(pets)}), 200
    except FileNotFoundError as e:
        return jsonify({"success": False, "error_code": "ADOPTER_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"Pet matching API error (adopter_id: {adopter_id}): {e}", exc_info=True)
        return jsonify({"success": False, "error_code": "MATCHING_FAILED", "message": "AI matching failed"}), 500


@pets_bp.route('/<string:pet_id>', methods=['GET'])
def get_pet_detail(pet_id: str):
    """[공개용] 보호소 정보를 포함한 반려동물 상세."""
    pet_service = current_app.services['pets']
    try:
        pet = pet_service.get_pet_detail(pet_id)
        return jsonify({"success": True, "pet": PetResponseSchema().dump(pet)}), 200
    except FileNotFoundError as e:
        return jsonify({"success": False, "error_code": "PET_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"Get pet detail API error (pet_id: {pet_id}): {e}", exc_info=True)
        return jsonify({"success": False, "error_code": "FETCH_FAILED", "message": "Failed to load pet"}), 500


# ================== 보호소 반려동물 관리 ==================

@shelter_pets_bp.route('/<string:shelter_id>/pets', methods=['GET'])
@role_required(ROLE_SHELTER, id_arg='shelter_id')
def list_shelter_pets(shelter_id: str):
    pet_service = current_app.services['pets']
    try:
        pets = pet_service.list_shelter_pets(shelter_id, status=request.args.get('status'))
        return jsonify({"success": True, "pets": PetResponseSchema(many=True).dump(pets)}), 200
    except Exception as e:
        logging.error(f"List shelter pets API error (shelter_id: {shelter_id}): {e}", exc_info=True)
        return jsonify({"success": False, "error_code": "FETCH_FAILED", "message": "Failed to load pets"}), 500


@shelter_pets_bp.route('/<string:shelter_id>/adopted-pets', methods=['GET'])
@role_required(ROLE_SHELTER, id_arg='shelter_id')
def list_adopted_pets(shelter_id: str):
    """입양 후 모니터링용 Adopted 반려동물 목록."""
    pet_service = current_app.services['pets']
    try:
        pets = pet_service.list_shelter_pets(shelter_id, status='Adopted')
        return jsonify({"success": True, "pets": PetResponseSchema(many=True).dump(pets)}), 200
    except Exception as e:
        logging.error(f"List adopted pets API error (shelter_id: {shelter_id}): {e}", exc_info=True)
        return jsonify({"success": False, "error_code": "FETCH_FAILED", "message": "Failed to load pets"}), 500


@shelter_pets_bp.route('/<string:shelter_id>/pets', methods=['POST'])
@role_required(ROLE_SHELTER, id_arg='shelter_id')
def create_pet(shelter_id: str):
    pet_service = current_app.services['pets']
    try:
        pet_data = PetCreateSchema().load(request.get_json() or {})
        pet = pet_service.create_pet(shelter_id, pet_data)
        return jsonify({"success": True, "message": "Pet added successfully",
                        "pet": PetResponseSchema().dump(pet)}), 201
    except ValidationError as err:
        return jsonify({"success": False, "error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except FileNotFoundError as e:
        return jsonify({"success": False, "error_code": "SHELTER_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"Create pet API error (shelter_id: {shelter_id}): {e}", exc_info=True)
        return jsonify({"success": False, "error_code": "PET_REGISTRATION_FAILED",
                        "message": "Failed to add pet"}), 500


@shelter_pets_bp.route('/<string:shelter_id>/pets/<string:pet_id>', methods=['PUT'])
@role_required(ROLE_SHELTER, id_arg='shelter_id')
def update_pet(shelter_id: str, pet_id: str):
    pet_service = current_app.services['pets']
    try:
        update_data = PetUpdateSchema().load(request.get_json() or {})
        pet = pet_service.update_pet(shelter_id, pet_id, update_data)
        return jsonify({"success": True, "pet": PetResponseSchema().dump(pet)}), 200
    except ValidationError as err:
        return jsonify({"success": False, "error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except FileNotFoundError as e:
        return jsonify({"success": False, "error_code": "PET_NOT_FOUND", "message": str(e)}), 404
    except PermissionError as e:
        return jsonify({"success": False, "error_code": "FORBIDDEN", "message": str(e)}), 403
    except ValueError as e:
        return jsonify({"success": False, "error_code": "INVALID_STATE", "message": str(e)}), 409
    except Exception as e:
        logging.error(f"Update pet API error (pet_id: {pet_id}): {e}", exc_info=True)
        return jsonify({"success": False, "error_code": "UPDATE_FAILED", "message": "Failed to update pet"}), 500


@shelter_pets_bp.route('/<string:shelter_id>/pets/<string:pet_id>', methods=['DELETE'])
@role_required(ROLE_SHELTER, id_arg='shelter_id')
def delete_pet(shelter_id: str, pet_id: str):
    pet_service = current_app.services['pets']
    try:
        removed = pet_service.delete_pet(shelter_id, pet_id)
        return jsonify({"success": True, "message": "Pet deleted successfully",
                        "removed_requests": removed}), 200
    except FileNotFoundError as e:
        return jsonify({"success": False, "error_code": "PET_NOT_FOUND", "message": str(e)}), 404
    except PermissionError as e:
        return jsonify({"success": False, "error_code": "FORBIDDEN", "message": str(e)}), 403
    except Exception as e:
        logging.error(f"Delete pet API error (pet_id: {pet_id}): {e}", exc_info=True)
        return jsonify({"success": False, "error_code": "DELETE_FAILED", "message": "Failed to delete pet"}), 500
