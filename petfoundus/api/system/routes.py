# petfoundus/api/system/routes.py
from flask import Blueprint, jsonify, current_app

from petfoundus.utils.datetime_utils import DateTimeUtils

system_bp = Blueprint('system_bp', __name__)


@system_bp.route('/health', methods=['GET'])
def health():
    return jsonify({
        "success": True,
        "status": "OK",
        "message": "PET Found Us API is running",
        "timestamp": DateTimeUtils.to_iso_string(DateTimeUtils.now()),
    }), 200


@system_bp.route('/contact', methods=['GET'])
def public_contact():
    """공개 연락처 (설정값)."""
    config = current_app.config
    return jsonify({
        "success": True,
        "contact": {
            "name": config.get('PUBLIC_CONTACT_NAME'),
            "email": config.get('PUBLIC_CONTACT_EMAIL'),
            "phone": config.get('PUBLIC_CONTACT_PHONE'),
        },
    }), 200
