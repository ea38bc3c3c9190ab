# petfoundus/core/security.py
from functools import wraps
from typing import Optional

from flask import jsonify
from flask_jwt_extended import create_access_token, get_jwt, get_jwt_identity, verify_jwt_in_request
from werkzeug.security import generate_password_hash, check_password_hash

ROLE_ADOPTER = "adopter"
ROLE_SHELTER = "shelter"


def hash_password(password: str) -> str:
    return generate_password_hash(password)


def verify_password(password: str, password_hash: Optional[str]) -> bool:
    if not password_hash:
        return False
    return check_password_hash(password_hash, password)


def issue_access_token(identity: str, role: str) -> str:
    """로그인 성공 시 역할(role) 클레임을 포함한 Access Token을 발급합니다."""
    return create_access_token(identity=identity, additional_claims={"role": role})


def role_required(role: str, id_arg: Optional[str] = None):
    """
    JWT 검증 후 역할을 확인하는 데코레이터.
    id_arg가 주어지면 URL 인자(예: shelter_id)와 토큰 identity가 일치해야 합니다.
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            verify_jwt_in_request()
            if get_jwt().get("role") != role:
                return jsonify({"success": False, "error_code": "FORBIDDEN",
                                "message": f"This action requires a {role} account"}), 403
            if id_arg and kwargs.get(id_arg) != get_jwt_identity():
                return jsonify({"success": False, "error_code": "FORBIDDEN",
                                "message": "You can only act on your own account"}), 403
            return f(*args, **kwargs)
        return decorated_function
    return decorator


def current_role() -> Optional[str]:
    """(선택적 JWT 라우트에서) 현재 토큰의 역할을 반환합니다. 토큰이 없으면 None."""
    claims = get_jwt()
    return claims.get("role") if claims else None
