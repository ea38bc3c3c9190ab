# petfoundus/api/vet_clinics/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app
from marshmallow import ValidationError, EXCLUDE

from .schemas import NearbyQuerySchema, VetClinicResponseSchema

vet_clinics_bp = Blueprint('vet_clinics_bp', __name__)


@vet_clinics_bp.route('/nearby', methods=['GET'])
def nearby_clinics():
    """좌표 기준 반경 내 동물병원을 가까운 순으로 반환합니다."""
    clinic_service = current_app.services['vet_clinics']
    try:
        query = NearbyQuerySchema(unknown=EXCLUDE).load(request.args.to_dict())
        clinics = clinic_service.find_nearby(
            query['lat'], query['lng'],
            max_distance_m=current_app.config['VET_CLINIC_MAX_DISTANCE_M'],
            limit=current_app.config['VET_CLINIC_RESULT_LIMIT'],
        )
        return jsonify({"success": True, "clinics": VetClinicResponseSchema(many=True).dump(clinics)}), 200
    except ValidationError as err:
        return jsonify({"success": False, "error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except Exception as e:
        logging.error(f"Nearby vet clinics API error: {e}", exc_info=True)
        return jsonify({"success": False, "error_code": "FETCH_FAILED", "message": "Server error"}), 500
