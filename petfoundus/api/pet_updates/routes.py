# petfoundus/api/pet_updates/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity
from marshmallow import ValidationError

from petfoundus.core.security import role_required, ROLE_ADOPTER
from petfoundus.utils.image_utils import read_uploads
from .schemas import PetUpdateCreateSchema, PetUpdateResponseSchema
from .services import update_to_response

pet_updates_bp = Blueprint('pet_updates_bp', __name__)


@pet_updates_bp.route('', methods=['POST'])
@role_required(ROLE_ADOPTER)
def submit_update():
    """입양 후 근황 등록 (multipart/form-data)."""
    adopter_id = get_jwt_identity()
    update_service = current_app.services['pet_updates']
    try:
        data = PetUpdateCreateSchema().load(request.form.to_dict())
        files = request.files.getlist('images')
        max_images = current_app.config['MAX_PET_UPDATE_IMAGES']
        if len(files) > max_images:
            return jsonify({"success": False, "error_code": "TOO_MANY_IMAGES",
                            "message": f"At most {max_images} images are allowed"}), 400
        images = read_uploads(files, current_app.config['MAX_INLINE_IMAGE_BYTES'])
        update = update_service.submit_update(adopter_id, data, images)
        return jsonify({"success": True, "message": "Update sent to shelter",
                        "update": PetUpdateResponseSchema().dump(update_to_response(update))}), 201
    except ValidationError as err:
        return jsonify({"success": False, "error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except FileNotFoundError as e:
        return jsonify({"success": False, "error_code": "NOT_FOUND", "message": str(e)}), 404
    except PermissionError as e:
        return jsonify({"success": False, "error_code": "FORBIDDEN", "message": str(e)}), 403
    except ValueError as e:
        return jsonify({"success": False, "error_code": "INVALID_IMAGE", "message": str(e)}), 400
    except Exception as e:
        logging.error(f"Submit pet update API error: {e}", exc_info=True)
        return jsonify({"success": False, "error_code": "UPDATE_FAILED", "message": "Failed to submit update"}), 500


@pet_updates_bp.route('/pet/<string:pet_id>', methods=['GET'])
@jwt_required()
def list_pet_updates(pet_id: str):
    update_service = current_app.services['pet_updates']
    try:
        updates = [update_to_response(u) for u in update_service.list_for_pet(pet_id)]
        return jsonify({"success": True, "updates": PetUpdateResponseSchema(many=True).dump(updates)}), 200
    except Exception as e:
        logging.error(f"List pet updates API error (pet_id: {pet_id}): {e}", exc_info=True)
        return jsonify({"success": False, "error_code": "FETCH_FAILED", "message": "Failed to load updates"}), 500
