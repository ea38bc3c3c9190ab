# petfoundus/models/pet.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, List, Dict, Any
from enum import Enum
import logging


class Species(Enum):
    DOG = "Dog"
    CAT = "Cat"


class PetGender(Enum):
    MALE = "Male"
    FEMALE = "Female"


class PetSize(Enum):
    SMALL = "Small"
    MEDIUM = "Medium"
    LARGE = "Large"


class AdoptionStatus(Enum):
    AVAILABLE = "Available"
    PENDING = "Pending"
    ADOPTED = "Adopted"


TEMPERAMENT_LABELS = ['Calm', 'Playful', 'Energetic', 'Friendly', 'Independent']
GOOD_WITH_LABELS = ['Children', 'Other Dogs', 'Other Cats', 'Elderly', 'Single Adults']


@dataclass
class Pet:
    """
    Firestore 'pets' 컬렉션 문서 구조.
    보호소(shelter_id)가 소유하며, 입양 요청이 승인되는 순간에만 adoption_status가 Adopted로 바뀝니다.
    """
    pet_id: str
    shelter_id: str
    name: str
    species: Species
    gender: PetGender
    size: PetSize
    breed: Optional[str] = None
    age: Dict[str, int] = field(default_factory=lambda: {"years": 0, "months": 0})
    images: List[Dict[str, Any]] = field(default_factory=list)
    labels: Dict[str, List[str]] = field(default_factory=lambda: {"temperament": [], "good_with": []})
    health_status: Dict[str, Any] = field(default_factory=dict)
    vaccination_history: List[Dict[str, Any]] = field(default_factory=list)
    adoption_status: AdoptionStatus = AdoptionStatus.AVAILABLE
    adopted_by: Optional[str] = None
    adoption_date: Optional[datetime] = None
    description: Optional[str] = None
    special_needs: Optional[str] = None
    behavior_notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def total_age_months(self) -> int:
        return (self.age.get("years") or 0) * 12 + (self.age.get("months") or 0)

    @property
    def primary_image_url(self) -> Optional[str]:
        return self.images[0].get("url") if self.images else None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Pet":
        """
        Firestore에서 받은 딕셔너리로부터 Pet 인스턴스를 생성합니다.
        문자열로 저장된 Enum 값을 변환하고, 알 수 없는 필드는 무시합니다.
        """
        processed = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}

        # 잘못 저장된 값은 기본값으로 대체합니다. 입양 상태만은 추측하지 않습니다.
        enum_fields = {
            'species': (Species, Species.DOG),
            'gender': (PetGender, PetGender.MALE),
            'size': (PetSize, PetSize.MEDIUM),
            'adoption_status': (AdoptionStatus, None),
        }
        for key, (enum_cls, fallback) in enum_fields.items():
            raw = processed.get(key)
            if isinstance(raw, str):
                try:
                    processed[key] = enum_cls(raw)
                except ValueError:
                    if fallback is None:
                        raise
                    logging.warning(f"Invalid {enum_cls.__name__} value '{raw}' for pet {processed.get('pet_id')}. Defaulting to {fallback.value}.")
                    processed[key] = fallback

        labels = processed.get('labels') or {}
        processed['labels'] = {
            "temperament": list(labels.get('temperament') or []),
            "good_with": list(labels.get('good_with') or []),
        }
        processed['age'] = processed.get('age') or {"years": 0, "months": 0}
        for list_key in ('images', 'vaccination_history'):
            if processed.get(list_key) is None:
                processed[list_key] = []
        if processed.get('health_status') is None:
            processed['health_status'] = {}
        return cls(**processed)
