# petfoundus/api/adopters/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app
from marshmallow import ValidationError

from petfoundus.core.security import issue_access_token, role_required, ROLE_ADOPTER
from petfoundus.api.adoption_requests.schemas import AdoptionRequestResponseSchema
from .schemas import AdopterRegisterSchema, LoginSchema, AdopterUpdateSchema, AdopterResponseSchema

adopters_bp = Blueprint('adopters_bp', __name__)


@adopters_bp.route('/register', methods=['POST'])
def register():
    """입양자 회원가입 API."""
    adopter_service = current_app.services['adopters']
    try:
        data = AdopterRegisterSchema().load(request.get_json() or {})
        adopter = adopter_service.register(data)
        return jsonify({"success": True, "message": "Registration successful",
                        "adopter": AdopterResponseSchema().dump(adopter)}), 201
    except ValidationError as err:
        return jsonify({"success": False, "error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except ValueError as e:
        return jsonify({"success": False, "error_code": "EMAIL_EXISTS", "message": str(e)}), 409
    except Exception as e:
        logging.error(f"Adopter registration API error: {e}", exc_info=True)
        return jsonify({"success": False, "error_code": "REGISTRATION_FAILED",
                        "message": "Registration failed"}), 500


@adopters_bp.route('/login', methods=['POST'])
def login():
    adopter_service = current_app.services['adopters']
    try:
        data = LoginSchema().load(request.get_json() or {})
        adopter = adopter_service.authenticate(data['email'], data['password'])
        if not adopter:
            return jsonify({"success": False, "error_code": "INVALID_CREDENTIALS",
                            "message": "Invalid email or password"}), 401
        token = issue_access_token(adopter['adopter_id'], ROLE_ADOPTER)
        logging.info(f"Adopter logged in: {adopter['adopter_id']}")
        return jsonify({"success": True, "access_token": token,
                        "adopter": AdopterResponseSchema().dump(adopter)}), 200
    except ValidationError as err:
        return jsonify({"success": False, "error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except Exception as e:
        logging.error(f"Adopter login API error: {e}", exc_info=True)
        return jsonify({"success": False, "error_code": "LOGIN_FAILED", "message": "Login failed"}), 500


@adopters_bp.route('/<string:adopter_id>', methods=['GET'])
@role_required(ROLE_ADOPTER, id_arg='adopter_id')
def get_profile(adopter_id: str):
    """[본인 전용] 프로필, 입양한 반려동물, 입양 요청 목록."""
    adopter_service = current_app.services['adopters']
    request_service = current_app.services['adoption_requests']
    try:
        adopter = adopter_service.get_profile(adopter_id)
        requests = request_service.list_for_adopter(adopter_id)
        return jsonify({
            "success": True,
            "adopter": AdopterResponseSchema().dump(adopter),
            "adoption_requests": AdoptionRequestResponseSchema(many=True).dump(requests),
        }), 200
    except FileNotFoundError as e:
        return jsonify({"success": False, "error_code": "ADOPTER_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"Get adopter profile API error (adopter_id: {adopter_id}): {e}", exc_info=True)
        return jsonify({"success": False, "error_code": "FETCH_FAILED", "message": "Failed to load profile"}), 500


@adopters_bp.route('/<string:adopter_id>', methods=['PUT'])
@role_required(ROLE_ADOPTER, id_arg='adopter_id')
def update_profile(adopter_id: str):
    adopter_service = current_app.services['adopters']
    try:
        update_data = AdopterUpdateSchema().load(request.get_json() or {})
        adopter = adopter_service.update_profile(adopter_id, update_data)
        return jsonify({"success": True, "message": "Profile updated",
                        "adopter": AdopterResponseSchema().dump(adopter)}), 200
    except ValidationError as err:
        return jsonify({"success": False, "error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except FileNotFoundError as e:
        return jsonify({"success": False, "error_code": "ADOPTER_NOT_FOUND", "message": str(e)}), 404
    except ValueError as e:
        return jsonify({"success": False, "error_code": "VALIDATION_ERROR", "message": str(e)}), 400
    except Exception as e:
        logging.error(f"Update adopter profile API error (adopter_id: {adopter_id}): {e}", exc_info=True)
        return jsonify({"success": False, "error_code": "UPDATE_FAILED", "message": "Failed to update profile"}), 500
