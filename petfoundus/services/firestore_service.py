# petfoundus/services/firestore_service.py
"""
Firestore 문서 변환 공용 헬퍼.

도메인 데이터클래스 <-> Firestore 딕셔너리 변환 규칙을 한 곳에 모아
각 서비스가 Enum/날짜 변환을 반복하지 않도록 합니다.
"""
import hashlib
import logging
from dataclasses import asdict, is_dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

from petfoundus.utils.datetime_utils import DateTimeUtils


def _enum_values(obj: Any) -> Any:
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, dict):
        return {k: _enum_values(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_enum_values(v) for v in obj]
    return obj


def to_document(obj: Any) -> Dict[str, Any]:
    """
    데이터클래스(또는 dict)를 Firestore 저장용 딕셔너리로 변환합니다.
    - Enum 멤버 -> 문자열 값
    - date/naive datetime -> UTC datetime
    """
    data = asdict(obj) if is_dataclass(obj) else dict(obj)
    return DateTimeUtils.for_firestore(_enum_values(data))


def snapshot_to_dict(snapshot) -> Optional[Dict[str, Any]]:
    """DocumentSnapshot을 UTC로 정규화된 딕셔너리로 변환합니다. 문서가 없으면 None."""
    if snapshot is None or not snapshot.exists:
        return None
    return DateTimeUtils.from_firestore(snapshot.to_dict())


def stream_dicts(query, transaction=None) -> List[Dict[str, Any]]:
    """쿼리 결과를 딕셔너리 목록으로 반환합니다. transaction이 주어지면 트랜잭션 안에서 읽습니다."""
    if transaction is not None:
        snapshots = query.stream(transaction=transaction)
    else:
        snapshots = query.stream()
    return [DateTimeUtils.from_firestore(doc.to_dict()) for doc in snapshots]


def get_dicts_by_ids(collection_ref, ids: List[str]) -> Dict[str, Dict[str, Any]]:
    """여러 문서를 ID로 조회해 {id: dict} 형태로 반환합니다. 없는 문서는 건너뜁니다."""
    result = {}
    for doc_id in dict.fromkeys(ids):
        if not doc_id:
            continue
        data = snapshot_to_dict(collection_ref.document(doc_id).get())
        if data is None:
            logging.warning(f"Referenced document not found (collection: {collection_ref.id}, id: {doc_id})")
            continue
        result[doc_id] = data
    return result


# 이메일 중복 방지용 점유 문서 (account_emails/<role>_<sha256(email)>)
ACCOUNT_EMAILS_COLLECTION = 'account_emails'


def email_claim_id(role: str, email: str) -> str:
    """정규화된 이메일의 점유 문서 ID. 이메일에 '/'가 올 수 있어 해시를 사용합니다."""
    digest = hashlib.sha256(email.strip().lower().encode('utf-8')).hexdigest()
    return f"{role}_{digest}"
