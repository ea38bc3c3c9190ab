# petfoundus/api/reports/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity
from marshmallow import ValidationError

from petfoundus.core.security import role_required, current_role, ROLE_ADOPTER, ROLE_SHELTER
from petfoundus.utils.image_utils import read_uploads
from petfoundus.api.pets.schemas import PetResponseSchema
from .schemas import ReportCreateSchema, ReportStatusUpdateSchema, RescueRequestSchema, ReportResponseSchema
from .services import report_to_response

reports_bp = Blueprint('reports_bp', __name__)


@reports_bp.route('', methods=['POST'])
@role_required(ROLE_ADOPTER)
def submit_report():
    """유기동물 목격 신고 (multipart/form-data, 선택 사진 'photo')."""
    reporter_id = get_jwt_identity()
    report_service = current_app.services['reports']
    try:
        data = ReportCreateSchema().load(request.form.to_dict())
        photos = read_uploads([request.files.get('photo')], current_app.config['MAX_INLINE_IMAGE_BYTES'])
        report = report_service.submit_report(reporter_id, data, photos[0] if photos else None)
        return jsonify({"success": True, "message": "Report submitted successfully!",
                        "report": ReportResponseSchema().dump(report_to_response(report))}), 201
    except ValidationError as err:
        return jsonify({"success": False, "error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except ValueError as e:
        return jsonify({"success": False, "error_code": "INVALID_IMAGE", "message": str(e)}), 400
    except Exception as e:
        logging.error(f"Submit report API error: {e}", exc_info=True)
        return jsonify({"success": False, "error_code": "REPORT_FAILED", "message": "Failed to submit report"}), 500


@reports_bp.route('', methods=['GET'])
@jwt_required()
def list_reports():
    """보호소는 전체(선택적으로 ?user_id=), 입양자는 본인 신고만 조회합니다."""
    report_service = current_app.services['reports']
    try:
        if current_role() == ROLE_SHELTER:
            reports = report_service.list_reports(request.args.get('user_id'))
        else:
            reports = report_service.list_reports(get_jwt_identity())
        payload = [report_to_response(r) for r in reports]
        return jsonify({"success": True, "reports": ReportResponseSchema(many=True).dump(payload)}), 200
    except Exception as e:
        logging.error(f"List reports API error: {e}", exc_info=True)
        return jsonify({"success": False, "error_code": "FETCH_FAILED", "message": "Failed to load reports"}), 500


@reports_bp.route('/<string:report_id>', methods=['GET'])
@jwt_required()
def get_report(report_id: str):
    report_service = current_app.services['reports']
    try:
        report = report_service.get_report(report_id)
        if current_role() != ROLE_SHELTER and report.get('reported_by') != get_jwt_identity():
            return jsonify({"success": False, "error_code": "FORBIDDEN",
                            "message": "You can only view your own reports"}), 403
        return jsonify({"success": True,
                        "report": ReportResponseSchema().dump(report_to_response(report))}), 200
    except FileNotFoundError as e:
        return jsonify({"success": False, "error_code": "REPORT_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"Get report API error (report_id: {report_id}): {e}", exc_info=True)
        return jsonify({"success": False, "error_code": "FETCH_FAILED", "message": "Failed to load report"}), 500


@reports_bp.route('/<string:report_id>', methods=['PATCH'])
@role_required(ROLE_SHELTER)
def update_report_status(report_id: str):
    report_service = current_app.services['reports']
    try:
        data = ReportStatusUpdateSchema().load(request.get_json() or {})
        report = report_service.update_status(report_id, data['status'])
        return jsonify({"success": True,
                        "report": ReportResponseSchema().dump(report_to_response(report))}), 200
    except ValidationError as err:
        return jsonify({"success": False, "error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except FileNotFoundError as e:
        return jsonify({"success": False, "error_code": "REPORT_NOT_FOUND", "message": str(e)}), 404
    except ValueError as e:
        return jsonify({"success": False, "error_code": "ALREADY_RESCUED", "message": str(e)}), 409
    except Exception as e:
        logging.error(f"Update report API error (report_id: {report_id}): {e}", exc_info=True)
        return jsonify({"success": False, "error_code": "UPDATE_FAILED", "message": "Failed to update report"}), 500


@reports_bp.route('/<string:report_id>', methods=['DELETE'])
@jwt_required()
def delete_report(report_id: str):
    report_service = current_app.services['reports']
    try:
        report_service.delete_report(report_id, get_jwt_identity(), current_role() == ROLE_SHELTER)
        return jsonify({"success": True, "message": "Report deleted"}), 200
    except FileNotFoundError as e:
        return jsonify({"success": False, "error_code": "REPORT_NOT_FOUND", "message": str(e)}), 404
    except PermissionError as e:
        return jsonify({"success": False, "error_code": "FORBIDDEN", "message": str(e)}), 403
    except Exception as e:
        logging.error(f"Delete report API error (report_id: {report_id}): {e}", exc_info=True)
        return jsonify({"success": False, "error_code": "DELETE_FAILED", "message": "Failed to delete report"}), 500


@reports_bp.route('/<string:report_id>/rescue', methods=['POST'])
@role_required(ROLE_SHELTER)
def rescue_report(report_id: str):
    """신고된 동물을 구조해 보호소의 입양 가능 반려동물로 등록합니다."""
    shelter_id = get_jwt_identity()
    report_service = current_app.services['reports']
    try:
        pet_data = RescueRequestSchema().load(request.get_json() or {})
        pet = report_service.rescue_report(report_id, shelter_id, pet_data)
        return jsonify({"success": True, "message": "Animal rescued and added as a pet",
                        "pet": PetResponseSchema().dump(pet)}), 201
    except ValidationError as err:
        return jsonify({"success": False, "error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except FileNotFoundError as e:
        return jsonify({"success": False, "error_code": "NOT_FOUND", "message": str(e)}), 404
    except ValueError as e:
        return jsonify({"success": False, "error_code": "ALREADY_RESCUED", "message": str(e)}), 409
    except Exception as e:
        logging.error(f"Rescue report API error (report_id: {report_id}): {e}", exc_info=True)
        return jsonify({"success": False, "error_code": "RESCUE_FAILED", "message": "Failed to rescue report"}), 500
