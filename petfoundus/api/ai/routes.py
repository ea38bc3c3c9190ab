# petfoundus/api/ai/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity
from marshmallow import ValidationError

from petfoundus.core.security import current_role, ROLE_ADOPTER
from .schemas import LabelSuggestionRequestSchema, ChatRequestSchema

ai_bp = Blueprint('ai_bp', __name__)
chat_bp = Blueprint('chat_bp', __name__)


@ai_bp.route('/suggest-labels', methods=['POST'])
def suggest_labels():
    """반려동물 설명으로 성격/궁합 라벨을 추천합니다."""
    openai_service = current_app.services['openai']
    try:
        data = LabelSuggestionRequestSchema().load(request.get_json() or {})
        suggestions = openai_service.suggest_labels(
            description=data['description'],
            species=data['species'],
            breed=data.get('breed'),
            name=data.get('name'),
        )
        return jsonify({"success": True, "suggestions": suggestions}), 200
    except ValidationError as err:
        return jsonify({"success": False, "error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except RuntimeError as e:
        return jsonify({"success": False, "error_code": "AI_SERVICE_ERROR", "message": str(e)}), 502
    except Exception as e:
        logging.error(f"Label suggestion API error: {e}", exc_info=True)
        return jsonify({"success": False, "error_code": "AI_SUGGESTION_FAILED",
                        "message": "Failed to generate suggestions"}), 500


@chat_bp.route('', methods=['POST'])
@jwt_required(optional=True)
def chat():
    """챗봇 대화. 로그인한 입양자는 계정 기준으로 대화 기록이 유지됩니다."""
    chat_service = current_app.services['chat']
    try:
        data = ChatRequestSchema().load(request.get_json() or {})
        user_id = get_jwt_identity() if current_role() == ROLE_ADOPTER else None
        result = chat_service.reply(data['message'], user_id=user_id, session_id=data.get('session_id'))
        return jsonify({"success": True, **result}), 200
    except ValidationError as err:
        return jsonify({"success": False, "error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except RuntimeError as e:
        return jsonify({"success": False, "error_code": "AI_SERVICE_ERROR", "message": str(e)}), 502
    except Exception as e:
        logging.error(f"Chat API error: {e}", exc_info=True)
        return jsonify({"success": False, "error_code": "CHAT_FAILED", "message": "Failed to get a reply"}), 500
