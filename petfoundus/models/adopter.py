# petfoundus/models/adopter.py
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, List, Dict, Any


class ExperienceLevel(Enum):
    FIRST_TIME = "First-time"
    SOME_EXPERIENCE = "Some Experience"
    EXPERIENCED = "Experienced"


PREFERRED_SIZES = ['Small', 'Medium', 'Large']
PREFERRED_AGES = ['Puppy', 'Young', 'Adult', 'Senior']


def default_preferences() -> Dict[str, Any]:
    return {
        "preferred_size": [],
        "preferred_age": [],
        "preferred_temperament": [],
        "has_garden": False,
        "has_other_pets": False,
        "has_children": False,
        "experience_level": ExperienceLevel.FIRST_TIME.value,
    }


@dataclass
class Adopter:
    """
    Firestore 'adopters' 컬렉션의 문서 구조를 정의하는 데이터클래스.
    adopted_pets 항목: {pet_id, shelter_id, adoption_date}
    입양 요청은 'adoption_requests' 컬렉션에 독립 문서로 저장됩니다.
    """
    adopter_id: str
    email: str
    password_hash: str
    full_name: str
    phone: str
    address: Dict[str, Optional[str]] = field(default_factory=dict)
    preferences: Dict[str, Any] = field(default_factory=default_preferences)
    adopted_pets: List[Dict[str, Any]] = field(default_factory=list)
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
