# petfoundus/models/reminder_template.py
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ReminderCategory(Enum):
    VACCINATION = "Vaccination"
    HEALTH_CHECK = "Health Check"


@dataclass
class ReminderTemplate:
    """
    Firestore 'reminder_templates' 컬렉션 문서 구조.
    보호소별로 정의되며, 입양 승인 시점 + days_after_adoption 일에 리마인더를 생성하는 규칙입니다.
    """
    template_id: str
    shelter_id: str
    title: str
    category: ReminderCategory
    days_after_adoption: int
    description: Optional[str] = None
    active: bool = True
