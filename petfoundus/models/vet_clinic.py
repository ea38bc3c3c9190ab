# petfoundus/models/vet_clinic.py
from dataclasses import dataclass
from typing import Optional


@dataclass
class VetClinic:
    """Firestore 'vet_clinics' 컬렉션 문서 구조."""
    clinic_id: str
    name: str
    lat: float
    lng: float
    address: Optional[str] = None
    phone: Optional[str] = None
