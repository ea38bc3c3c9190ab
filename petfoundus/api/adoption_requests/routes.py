# petfoundus/api/adoption_requests/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app
from marshmallow import ValidationError

from petfoundus.core.security import role_required, ROLE_ADOPTER, ROLE_SHELTER
from .schemas import (
    AdoptionRequestCreateSchema,
    ShelterDecisionSchema,
    AdoptionRequestResponseSchema,
    ShelterRequestRowSchema,
)

# /api/adopters/<adopter_id>/request(s)
adopter_requests_bp = Blueprint('adopter_requests_bp', __name__)
# /api/shelters/<shelter_id>/requests
shelter_requests_bp = Blueprint('shelter_requests_bp', __name__)

DECISION_STATUS_CODE_MAP = {"SUCCESS": 200, "NOT_PENDING": 409}
DECISION_MESSAGES = {"NOT_PENDING": "Request is not pending"}


@adopter_requests_bp.route('/<string:adopter_id>/request', methods=['POST'])
@role_required(ROLE_ADOPTER, id_arg='adopter_id')
def create_request(adopter_id: str):
    """입양 요청 생성 API."""
    request_service = current_app.services['adoption_requests']
    try:
        data = AdoptionRequestCreateSchema().load(request.get_json() or {})
        new_request = request_service.create_request(adopter_id, data['pet_id'])
        return jsonify({"success": True, "message": "Adoption request submitted",
                        "request": AdoptionRequestResponseSchema().dump(new_request)}), 201
    except ValidationError as err:
        return jsonify({"success": False, "error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except FileNotFoundError as e:
        return jsonify({"success": False, "error_code": "NOT_FOUND", "message": str(e)}), 404
    except ValueError as e:
        return jsonify({"success": False, "error_code": "REQUEST_CONFLICT", "message": str(e)}), 409
    except Exception as e:
        logging.error(f"Create adoption request API error (adopter_id: {adopter_id}): {e}", exc_info=True)
        return jsonify({"success": False, "error_code": "REQUEST_FAILED",
                        "message": "Failed to submit adoption request"}), 500


@adopter_requests_bp.route('/<string:adopter_id>/request/<string:pet_id>', methods=['DELETE'])
@role_required(ROLE_ADOPTER, id_arg='adopter_id')
def cancel_request(adopter_id: str, pet_id: str):
    """Pending 상태의 입양 요청만 취소할 수 있습니다."""
    request_service = current_app.services['adoption_requests']
    try:
        request_service.cancel_request(adopter_id, pet_id)
        return jsonify({"success": True, "message": "Adoption request cancelled"}), 200
    except FileNotFoundError as e:
        return jsonify({"success": False, "error_code": "REQUEST_NOT_FOUND", "message": str(e)}), 404
    except ValueError as e:
        return jsonify({"success": False, "error_code": "REQUEST_NOT_PENDING", "message": str(e)}), 409
    except Exception as e:
        logging.error(f"Cancel adoption request API error (adopter_id: {adopter_id}, pet_id: {pet_id}): {e}", exc_info=True)
        return jsonify({"success": False, "error_code": "CANCEL_FAILED",
                        "message": "Failed to cancel adoption request"}), 500


@adopter_requests_bp.route('/<string:adopter_id>/requests', methods=['GET'])
@role_required(ROLE_ADOPTER, id_arg='adopter_id')
def list_adopter_requests(adopter_id: str):
    request_service = current_app.services['adoption_requests']
    try:
        requests = request_service.list_for_adopter(adopter_id)
        return jsonify({"success": True,
                        "requests": AdoptionRequestResponseSchema(many=True).dump(requests)}), 200
    except Exception as e:
        logging.error(f"List adopter requests API error (adopter_id: {adopter_id}): {e}", exc_info=True)
        return jsonify({"success": False, "error_code": "FETCH_FAILED",
                        "message": "Failed to load adoption requests"}), 500


# ================== 보호소 측 ==================

@shelter_requests_bp.route('/<string:shelter_id>/requests', methods=['GET'])
@role_required(ROLE_SHELTER, id_arg='shelter_id')
def list_shelter_requests(shelter_id: str):
    request_service = current_app.services['adoption_requests']
    try:
        rows = request_service.list_for_shelter(shelter_id)
        return jsonify({"success": True, "requests": ShelterRequestRowSchema(many=True).dump(rows)}), 200
    except Exception as e:
        logging.error(f"List shelter requests API error (shelter_id: {shelter_id}): {e}", exc_info=True)
        return jsonify({"success": False, "error_code": "FETCH_FAILED",
                        "message": "Failed to load adoption requests"}), 500


def _decide(shelter_id: str, request_id: str, decision: str):
    request_service = current_app.services['adoption_requests']
    try:
        data = ShelterDecisionSchema().load(request.get_json(silent=True) or {})
        if decision == 'approve':
            result = request_service.approve_request(shelter_id, request_id, data.get('message'))
        else:
            result = request_service.reject_request(shelter_id, request_id, data.get('message'))

        status = result.get("status")
        body = dict(result, success=(status == "SUCCESS"))
        if status in DECISION_MESSAGES:
            body["message"] = DECISION_MESSAGES[status]
        else:
            body["message"] = f"Adoption request {'approved' if decision == 'approve' else 'rejected'}"
        return jsonify(body), DECISION_STATUS_CODE_MAP.get(status, 500)

    except ValidationError as err:
        return jsonify({"success": False, "error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except FileNotFoundError as e:
        return jsonify({"success": False, "error_code": "NOT_FOUND", "message": str(e)}), 404
    except PermissionError as e:
        return jsonify({"success": False, "error_code": "FORBIDDEN", "message": str(e)}), 403
    except ValueError as e:
        return jsonify({"success": False, "error_code": "PET_UNAVAILABLE", "message": str(e)}), 409
    except Exception as e:
        logging.error(f"Adoption request {decision} API error (request_id: {request_id}): {e}", exc_info=True)
        return jsonify({"success": False, "error_code": "DECISION_FAILED",
                        "message": f"Failed to {decision} adoption request"}), 500


@shelter_requests_bp.route('/<string:shelter_id>/requests/<string:request_id>/approve', methods=['POST'])
@role_required(ROLE_SHELTER, id_arg='shelter_id')
def approve_request(shelter_id: str, request_id: str):
    """입양 요청 승인: 반려동물 입양 처리, 다른 요청 거절, 케어 리마인더 생성."""
    return _decide(shelter_id, request_id, 'approve')


@shelter_requests_bp.route('/<string:shelter_id>/requests/<string:request_id>/reject', methods=['PATCH'])
@role_required(ROLE_SHELTER, id_arg='shelter_id')
def reject_request(shelter_id: str, request_id: str):
    return _decide(shelter_id, request_id, 'reject')
