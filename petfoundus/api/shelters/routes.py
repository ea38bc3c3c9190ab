# petfoundus/api/shelters/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app
from marshmallow import ValidationError

from petfoundus.core.security import issue_access_token, role_required, ROLE_SHELTER
from petfoundus.api.adopters.schemas import LoginSchema
from .schemas import ShelterUpdateSchema, ShelterResponseSchema, ShelterStatsSchema

shelters_bp = Blueprint('shelters_bp', __name__)


@shelters_bp.route('/login', methods=['POST'])
def login():
    """보호소 로그인 API."""
    shelter_service = current_app.services['shelters']
    try:
        data = LoginSchema().load(request.get_json() or {})
        shelter = shelter_service.authenticate(data['email'], data['password'])
        if not shelter:
            return jsonify({"success": False, "error_code": "INVALID_CREDENTIALS",
                            "message": "Invalid email or password"}), 401
        token = issue_access_token(shelter['shelter_id'], ROLE_SHELTER)
        logging.info(f"Shelter logged in: {shelter['shelter_id']}")
        return jsonify({"success": True, "access_token": token,
                        "shelter": ShelterResponseSchema().dump(shelter)}), 200
    except ValidationError as err:
        return jsonify({"success": False, "error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except Exception as e:
        logging.error(f"Shelter login API error: {e}", exc_info=True)
        return jsonify({"success": False, "error_code": "LOGIN_FAILED", "message": "Login failed"}), 500


@shelters_bp.route('/<string:shelter_id>', methods=['GET'])
def get_shelter(shelter_id: str):
    """[공개용] 보호소 정보."""
    shelter_service = current_app.services['shelters']
    try:
        shelter = shelter_service.get_shelter(shelter_id)
        return jsonify({"success": True, "shelter": ShelterResponseSchema().dump(shelter)}), 200
    except FileNotFoundError as e:
        return jsonify({"success": False, "error_code": "SHELTER_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"Get shelter API error (shelter_id: {shelter_id}): {e}", exc_info=True)
        return jsonify({"success": False, "error_code": "FETCH_FAILED", "message": "Failed to load shelter"}), 500


@shelters_bp.route('/<string:shelter_id>', methods=['PUT'])
@role_required(ROLE_SHELTER, id_arg='shelter_id')
def update_shelter(shelter_id: str):
    shelter_service = current_app.services['shelters']
    try:
        update_data = ShelterUpdateSchema().load(request.get_json() or {})
        shelter = shelter_service.update_profile(shelter_id, update_data)
        return jsonify({"success": True, "shelter": ShelterResponseSchema().dump(shelter)}), 200
    except ValidationError as err:
        return jsonify({"success": False, "error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except FileNotFoundError as e:
        return jsonify({"success": False, "error_code": "SHELTER_NOT_FOUND", "message": str(e)}), 404
    except ValueError as e:
        return jsonify({"success": False, "error_code": "VALIDATION_ERROR", "message": str(e)}), 400
    except Exception as e:
        logging.error(f"Update shelter API error (shelter_id: {shelter_id}): {e}", exc_info=True)
        return jsonify({"success": False, "error_code": "UPDATE_FAILED", "message": "Failed to update shelter"}), 500


@shelters_bp.route('/<string:shelter_id>/stats', methods=['GET'])
@role_required(ROLE_SHELTER, id_arg='shelter_id')
def get_stats(shelter_id: str):
    """보호소 대시보드 통계."""
    shelter_service = current_app.services['shelters']
    try:
        stats = shelter_service.get_stats(shelter_id)
        return jsonify({"success": True, "stats": ShelterStatsSchema().dump(stats)}), 200
    except Exception as e:
        logging.error(f"Shelter stats API error (shelter_id: {shelter_id}): {e}", exc_info=True)
        return jsonify({"success": False, "error_code": "FETCH_FAILED", "message": "Failed to load stats"}), 500
