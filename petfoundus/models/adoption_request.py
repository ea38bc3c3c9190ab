# petfoundus/models/adoption_request.py
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Dict, Any


class RequestStatus(Enum):
    """입양 요청 상태: Pending -> Approved | Rejected"""
    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"


# (adopter, pet) 쌍마다 이 상태들 중 하나인 요청은 최대 한 개만 존재할 수 있습니다.
UNRESOLVED_STATUSES = (RequestStatus.PENDING.value, RequestStatus.APPROVED.value)


@dataclass
class AdoptionRequest:
    """
    Firestore 'adoption_requests' 컬렉션의 문서 구조.
    shelter_id는 보호소별 요청 목록 조회를 위해 생성 시점에 반려동물 문서에서 복사합니다.
    """
    request_id: str
    adopter_id: str
    pet_id: str
    shelter_id: str
    request_date: datetime
    status: RequestStatus = RequestStatus.PENDING
    shelter_response: Optional[Dict[str, Any]] = None  # {message, responded_at}
