# petfoundus/models/report.py
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Dict


class ReportStatus(Enum):
    PENDING = "Pending"
    INVESTIGATING = "Investigating"
    RESCUED = "Rescued"
    REJECTED = "Rejected"


@dataclass
class Report:
    """
    Firestore 'reports' 컬렉션 문서 구조 (유기동물 목격 신고).
    사진은 별도 스토리지 없이 문서 안에 바이너리로 저장합니다.
    """
    report_id: str
    reported_by: str
    animal_type: str
    number: int
    condition: str
    animal_desc: str
    place_desc: str
    pin: Dict[str, float] = field(default_factory=dict)  # lat, lng
    photo: Optional[bytes] = None
    photo_content_type: Optional[str] = None
    status: ReportStatus = ReportStatus.PENDING
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
