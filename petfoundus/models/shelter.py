# petfoundus/models/shelter.py
from dataclasses import dataclass, field
from typing import Optional, List, Dict


@dataclass
class Shelter:
    """
    Firestore 'shelters' 컬렉션의 문서 구조를 정의하는 데이터클래스.
    pets는 소속 반려동물 ID의 비정규화된 목록입니다.
    """
    shelter_id: str
    name: str
    email: str
    password_hash: str
    phone: Optional[str] = None
    location: Dict[str, Optional[str]] = field(default_factory=dict)  # address, city, state
    pets: List[str] = field(default_factory=list)
