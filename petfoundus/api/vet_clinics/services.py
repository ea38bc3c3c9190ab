# petfoundus/api/vet_clinics/services.py
import logging
import uuid
from typing import Dict, Any, List
from firebase_admin import firestore

from petfoundus.models.vet_clinic import VetClinic
from petfoundus.utils.geo_utils import haversine_distance_m
from petfoundus.services.firestore_service import to_document, stream_dicts

DEFAULT_CLINICS = [
    {"name": "Island Veterinary Clinic", "address": "Jalan Perak, George Town, Penang", "lat": 5.4213, "lng": 100.3129},
    {"name": "Gurney Veterinary Clinic", "address": "Gurney Drive, Penang", "lat": 5.4378, "lng": 100.3067},
    {"name": "Rainbow Veterinary Clinic", "address": "Sungai Dua, Penang", "lat": 5.3535, "lng": 100.2946},
]


class VetClinicService:
    """주변 동물병원 검색 서비스. 병원 수가 적어 전체를 읽고 거리순으로 정렬합니다."""

    def __init__(self):
        self.db = firestore.client()
        self.clinics_ref = self.db.collection('vet_clinics')

    def find_nearby(self, lat: float, lng: float, max_distance_m: float, limit: int) -> List[Dict[str, Any]]:
        clinics = []
        for clinic in stream_dicts(self.clinics_ref):
            distance = haversine_distance_m(lat, lng, clinic['lat'], clinic['lng'])
            if distance <= max_distance_m:
                clinic['distance'] = round(distance, 1)
                clinics.append(clinic)
        clinics.sort(key=lambda c: c['distance'])
        return clinics[:limit]

    def seed_defaults(self) -> int:
        """기존 병원 데이터를 지우고 기본 병원 목록으로 교체합니다."""
        batch = self.db.batch()
        for snapshot in self.clinics_ref.stream():
            batch.delete(snapshot.reference)
        for data in DEFAULT_CLINICS:
            clinic = VetClinic(clinic_id=str(uuid.uuid4()), **data)
            batch.set(self.clinics_ref.document(clinic.clinic_id), to_document(clinic))
        batch.commit()
        logging.info(f"Seeded {len(DEFAULT_CLINICS)} veterinary clinics")
        return len(DEFAULT_CLINICS)
