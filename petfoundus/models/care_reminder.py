# petfoundus/models/care_reminder.py
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from petfoundus.models.reminder_template import ReminderCategory


class ReminderStatus(Enum):
    PENDING = "Pending"
    COMPLETED = "Completed"
    DISABLED = "Disabled"


class ReminderSource(Enum):
    SYSTEM = "System"
    SHELTER = "Shelter"


@dataclass
class CareReminder:
    """
    Firestore 'care_reminders' 컬렉션 문서 구조.
    입양 승인(또는 백필) 시 보호소의 리마인더 템플릿으로부터 (pet, adopter) 단위로 생성됩니다.
    """
    reminder_id: str
    pet_id: str
    adopter_id: str
    shelter_id: str
    title: str
    category: ReminderCategory
    due_date: datetime
    template_id: Optional[str] = None
    description: Optional[str] = None
    status: ReminderStatus = ReminderStatus.PENDING
    completed_at: Optional[datetime] = None
    notes: Optional[str] = None
    created_by: ReminderSource = ReminderSource.SYSTEM
    updated_by: ReminderSource = ReminderSource.SYSTEM
    created_at: Optional[datetime] = None
