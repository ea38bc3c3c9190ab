# petfoundus/api/reminders/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity
from marshmallow import ValidationError

from petfoundus.core.security import role_required, current_role, ROLE_ADOPTER, ROLE_SHELTER
from .schemas import (
    CareReminderResponseSchema,
    ReminderShelterUpdateSchema,
    ReminderTemplateCreateSchema,
    ReminderTemplateUpdateSchema,
    ReminderTemplateResponseSchema,
)

reminders_bp = Blueprint('reminders_bp', __name__)
# /api/shelters/<shelter_id>/reminder-templates 하위 경로
reminder_templates_bp = Blueprint('reminder_templates_bp', __name__)

PREVIEW_LIMIT = 5


@reminders_bp.route('/pet/<string:pet_id>', methods=['GET'])
@jwt_required()
def get_pet_reminders(pet_id: str):
    """반려동물의 리마인더 목록 (입양자는 본인 것만, 보호소는 소속 반려동물 것만)."""
    identity = get_jwt_identity()
    role = current_role()
    reminder_service = current_app.services['reminders']
    try:
        if role == ROLE_ADOPTER:
            reminders = reminder_service.list_for_pet(pet_id, adopter_id=identity)
        else:
            reminders = reminder_service.list_for_pet(pet_id, shelter_id=identity)
        return jsonify({"success": True,
                        "reminders": CareReminderResponseSchema(many=True).dump(reminders)}), 200
    except Exception as e:
        logging.error(f"Get pet reminders API error (pet_id: {pet_id}): {e}", exc_info=True)
        return jsonify({"success": False, "error_code": "FETCH_FAILED",
                        "message": "Failed to load reminders"}), 500


@reminders_bp.route('/preview/<string:adopter_id>', methods=['GET'])
@role_required(ROLE_ADOPTER, id_arg='adopter_id')
def get_reminder_preview(adopter_id: str):
    """대시보드용 다가오는 리마인더 미리보기."""
    reminder_service = current_app.services['reminders']
    try:
        reminders = reminder_service.preview_for_adopter(adopter_id, limit=PREVIEW_LIMIT)
        return jsonify({"success": True,
                        "reminders": CareReminderResponseSchema(many=True).dump(reminders)}), 200
    except Exception as e:
        logging.error(f"Reminder preview API error (adopter_id: {adopter_id}): {e}", exc_info=True)
        return jsonify({"success": False, "error_code": "FETCH_FAILED",
                        "message": "Failed to load reminders"}), 500


@reminders_bp.route('/<string:reminder_id>/complete', methods=['PUT'])
@role_required(ROLE_ADOPTER)
def complete_reminder(reminder_id: str):
    adopter_id = get_jwt_identity()
    reminder_service = current_app.services['reminders']
    try:
        reminder = reminder_service.complete_reminder(reminder_id, adopter_id)
        return jsonify({"success": True, "message": "Reminder marked as completed",
                        "reminder": CareReminderResponseSchema().dump(reminder)}), 200
    except FileNotFoundError as e:
        return jsonify({"success": False, "error_code": "REMINDER_NOT_FOUND", "message": str(e)}), 404
    except PermissionError as e:
        return jsonify({"success": False, "error_code": "FORBIDDEN", "message": str(e)}), 403
    except ValueError as e:
        return jsonify({"success": False, "error_code": "INVALID_STATE", "message": str(e)}), 409
    except Exception as e:
        logging.error(f"Complete reminder API error (reminder_id: {reminder_id}): {e}", exc_info=True)
        return jsonify({"success": False, "error_code": "UPDATE_FAILED",
                        "message": "Failed to update reminder"}), 500


@reminders_bp.route('/<string:reminder_id>', methods=['PUT'])
@role_required(ROLE_SHELTER)
def update_reminder(reminder_id: str):
    """[보호소 전용] 마감일, 메모, 상태를 조정합니다."""
    shelter_id = get_jwt_identity()
    reminder_service = current_app.services['reminders']
    try:
        update_data = ReminderShelterUpdateSchema().load(request.get_json() or {})
        reminder = reminder_service.update_by_shelter(reminder_id, shelter_id, update_data)
        return jsonify({"success": True, "reminder": CareReminderResponseSchema().dump(reminder)}), 200
    except ValidationError as err:
        return jsonify({"success": False, "error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except FileNotFoundError as e:
        return jsonify({"success": False, "error_code": "REMINDER_NOT_FOUND", "message": str(e)}), 404
    except PermissionError as e:
        return jsonify({"success": False, "error_code": "FORBIDDEN", "message": str(e)}), 403
    except ValueError as e:
        return jsonify({"success": False, "error_code": "VALIDATION_ERROR", "message": str(e)}), 400
    except Exception as e:
        logging.error(f"Update reminder API error (reminder_id: {reminder_id}): {e}", exc_info=True)
        return jsonify({"success": False, "error_code": "UPDATE_FAILED",
                        "message": "Failed to update reminder"}), 500


# ================== 리마인더 템플릿 ==================

@reminder_templates_bp.route('/<string:shelter_id>/reminder-templates', methods=['GET'])
@role_required(ROLE_SHELTER, id_arg='shelter_id')
def list_templates(shelter_id: str):
    template_service = current_app.services['reminder_templates']
    try:
        templates = template_service.list_templates(shelter_id)
        return jsonify({"success": True,
                        "templates": ReminderTemplateResponseSchema(many=True).dump(templates)}), 200
    except Exception as e:
        logging.error(f"List reminder templates API error (shelter_id: {shelter_id}): {e}", exc_info=True)
        return jsonify({"success": False, "error_code": "FETCH_FAILED",
                        "message": "Failed to load reminder templates"}), 500


@reminder_templates_bp.route('/<string:shelter_id>/reminder-templates', methods=['POST'])
@role_required(ROLE_SHELTER, id_arg='shelter_id')
def create_template(shelter_id: str):
    template_service = current_app.services['reminder_templates']
    try:
        data = ReminderTemplateCreateSchema().load(request.get_json() or {})
        template = template_service.create_template(shelter_id, data)
        return jsonify({"success": True,
                        "template": ReminderTemplateResponseSchema().dump(template)}), 201
    except ValidationError as err:
        return jsonify({"success": False, "error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except Exception as e:
        logging.error(f"Create reminder template API error (shelter_id: {shelter_id}): {e}", exc_info=True)
        return jsonify({"success": False, "error_code": "CREATION_FAILED",
                        "message": "Failed to create reminder template"}), 500


@reminder_templates_bp.route('/<string:shelter_id>/reminder-templates/<string:template_id>', methods=['PATCH'])
@role_required(ROLE_SHELTER, id_arg='shelter_id')
def update_template(shelter_id: str, template_id: str):
    template_service = current_app.services['reminder_templates']
    try:
        data = ReminderTemplateUpdateSchema().load(request.get_json() or {})
        template = template_service.update_template(shelter_id, template_id, data)
        return jsonify({"success": True,
                        "template": ReminderTemplateResponseSchema().dump(template)}), 200
    except ValidationError as err:
        return jsonify({"success": False, "error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except FileNotFoundError as e:
        return jsonify({"success": False, "error_code": "TEMPLATE_NOT_FOUND", "message": str(e)}), 404
    except PermissionError as e:
        return jsonify({"success": False, "error_code": "FORBIDDEN", "message": str(e)}), 403
    except ValueError as e:
        return jsonify({"success": False, "error_code": "VALIDATION_ERROR", "message": str(e)}), 400
    except Exception as e:
        logging.error(f"Update reminder template API error (template_id: {template_id}): {e}", exc_info=True)
        return jsonify({"success": False, "error_code": "UPDATE_FAILED",
                        "message": "Failed to update reminder template"}), 500


@reminder_templates_bp.route('/<string:shelter_id>/reminder-templates/<string:template_id>', methods=['DELETE'])
@role_required(ROLE_SHELTER, id_arg='shelter_id')
def delete_template(shelter_id: str, template_id: str):
    template_service = current_app.services['reminder_templates']
    try:
        template_service.delete_template(shelter_id, template_id)
        return jsonify({"success": True, "message": "Reminder template deleted"}), 200
    except FileNotFoundError as e:
        return jsonify({"success": False, "error_code": "TEMPLATE_NOT_FOUND", "message": str(e)}), 404
    except PermissionError as e:
        return jsonify({"success": False, "error_code": "FORBIDDEN", "message": str(e)}), 403
    except Exception as e:
        logging.error(f"Delete reminder template API error (template_id: {template_id}): {e}", exc_info=True)
        return jsonify({"success": False, "error_code": "DELETE_FAILED",
                        "message": "Failed to delete reminder template"}), 500
