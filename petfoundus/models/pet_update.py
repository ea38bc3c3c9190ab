# petfoundus/models/pet_update.py
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, List, Dict, Any


class PetCondition(Enum):
    EXCELLENT = "Excellent"
    GOOD = "Good"
    FAIR = "Fair"
    NEEDS_ATTENTION = "Needs Attention"


@dataclass
class PetUpdate:
    """입양자가 보호소에 보내는 입양 후 근황 기록 ('pet_updates' 컬렉션)."""
    update_id: str
    pet_id: str
    adopter_id: str
    shelter_id: str
    notes: str
    weight: Optional[str] = None
    condition: Optional[PetCondition] = None
    images: List[Dict[str, Any]] = field(default_factory=list)  # {data: bytes, content_type}
    created_at: Optional[datetime] = None
