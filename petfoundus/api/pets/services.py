# petfoundus/api/pets/services.py
import logging
import uuid
from typing import Dict, Any, Optional, List
from firebase_admin import firestore
from firebase_admin.firestore import Transaction

# 도메인 모델
from petfoundus.models.pet import Pet, Species, PetGender, PetSize, AdoptionStatus
from petfoundus.models.adoption_request import RequestStatus

# 유틸리티 및 공용 서비스
from petfoundus.utils.datetime_utils import DateTimeUtils
from petfoundus.services.firestore_service import to_document, snapshot_to_dict, stream_dicts, get_dicts_by_ids
from .matching import preferences_complete, rank_pets

# 부분 업데이트 시 기존 값과 병합하는 중첩 필드
MERGED_FIELDS = ('age', 'labels', 'health_status')

SHELTER_PUBLIC_FIELDS = ('shelter_id', 'name', 'location', 'phone', 'email')


def public_shelter(shelter: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """비밀번호 해시 등을 제외한 보호소 공개 정보."""
    if shelter is None:
        return None
    return {key: shelter.get(key) for key in SHELTER_PUBLIC_FIELDS}


class PetService:
    """보호소 소속 반려동물의 등록/수정/삭제와 입양자용 탐색·매칭을 담당하는 서비스."""

    def __init__(self):
        self.db = firestore.client()
        self.pets_ref = self.db.collection('pets')
        self.shelters_ref = self.db.collection('shelters')
        self.adopters_ref = self.db.collection('adopters')
        self.requests_ref = self.db.collection('adoption_requests')
        logging.info("PetService initialized.")

    # ================== 조회 ==================
    def get_pet(self, pet_id: str) -> Dict[str, Any]:
        pet = snapshot_to_dict(self.pets_ref.document(pet_id).get())
        if pet is None:
            raise FileNotFoundError("Pet not found")
        return pet

    def _with_shelters(self, pets: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        shelters = get_dicts_by_ids(self.shelters_ref, [p.get('shelter_id') for p in pets])
        for pet in pets:
            pet['shelter'] = public_shelter(shelters.get(pet.get('shelter_id')))
        return pets

    def get_pet_detail(self, pet_id: str) -> Dict[str, Any]:
        """[공개용] 보호소 연락처를 포함한 반려동물 상세 정보."""
        return self._with_shelters([self.get_pet(pet_id)])[0]

    def list_available_pets(self) -> List[Dict[str, Any]]:
        """입양 가능한 반려동물을 최신 등록순으로 반환합니다."""
        query = self.pets_ref.where('adoption_status', '==', AdoptionStatus.AVAILABLE.value)
        pets = sorted(stream_dicts(query), key=lambda p: p.get('created_at') or DateTimeUtils.now(), reverse=True)
        return self._with_shelters(pets)

    def list_shelter_pets(self, shelter_id: str, status: Optional[str] = None) -> List[Dict[str, Any]]:
        query = self.pets_ref.where('shelter_id', '==', shelter_id)
        if status:
            query = query.where('adoption_status', '==', status)
        return sorted(stream_dicts(query), key=lambda p: p.get('created_at') or DateTimeUtils.now(), reverse=True)

    # ================== 등록 ==================
    def build_pet(self, shelter_id: str, pet_data: Dict[str, Any]) -> Pet:
        """요청 데이터로 새 Available 상태의 Pet 객체를 만듭니다. (저장하지 않음)"""
        now = DateTimeUtils.now()
        age = pet_data.get('age') or {}
        return Pet(
            pet_id=str(uuid.uuid4()),
            shelter_id=shelter_id,
            name=pet_data['name'],
            species=Species(pet_data.get('species') or Species.DOG.value),
            gender=PetGender(pet_data['gender']),
            size=PetSize(pet_data.get('size') or PetSize.MEDIUM.value),
            breed=pet_data.get('breed'),
            age={"years": age.get('years', 0), "months": age.get('months', 0)},
            images=list(pet_data.get('images') or []),
            labels={
                "temperament": list((pet_data.get('labels') or {}).get('temperament') or []),
                "good_with": list((pet_data.get('labels') or {}).get('good_with') or []),
            },
            health_status=dict(pet_data.get('health_status') or {}),
            vaccination_history=list(pet_data.get('vaccination_history') or []),
            adoption_status=AdoptionStatus.AVAILABLE,
            description=pet_data.get('description'),
            special_needs=pet_data.get('special_needs'),
            behavior_notes=pet_data.get('behavior_notes'),
            created_at=now,
            updated_at=now,
        )

    def add_pet_transactional(self, transaction: Transaction, shelter_ref, shelter: Dict[str, Any], pet: Pet) -> Dict[str, Any]:
        """[트랜잭션 쓰기 전용] 반려동물 문서 생성과 shelter.pets 추가를 함께 기록합니다."""
        pet_doc = to_document(pet)
        transaction.set(self.pets_ref.document(pet.pet_id), pet_doc)
        pet_ids = [pid for pid in (shelter.get('pets') or []) if pid != pet.pet_id]
        transaction.update(shelter_ref, {'pets': pet_ids + [pet.pet_id]})
        return pet_doc

    def create_pet(self, shelter_id: str, pet_data: Dict[str, Any]) -> Dict[str, Any]:
        """[트랜잭션] 반려동물 등록과 보호소의 pets 목록 갱신을 원자적으로 처리합니다."""
        transaction = self.db.transaction()
        shelter_ref = self.shelters_ref.document(shelter_id)
        new_pet = self.build_pet(shelter_id, pet_data)

        @firestore.transactional
        def _create_in_transaction(transaction: Transaction):
            shelter = snapshot_to_dict(shelter_ref.get(transaction=transaction))
            if shelter is None:
                raise FileNotFoundError("Shelter not found")
            return self.add_pet_transactional(transaction, shelter_ref, shelter, new_pet)

        pet_doc = _create_in_transaction(transaction)
        logging.info(f"Pet {new_pet.pet_id} ({new_pet.name}) registered by shelter {shelter_id}")
        return pet_doc

    # ================== 수정/삭제 ==================
    def _get_owned_pet(self, shelter_id: str, pet_id: str, transaction=None):
        ref = self.pets_ref.document(pet_id)
        snapshot = ref.get(transaction=transaction) if transaction is not None else ref.get()
        pet = snapshot_to_dict(snapshot)
        if pet is None:
            raise FileNotFoundError("Pet not found")
        if pet.get('shelter_id') != shelter_id:
            raise PermissionError("This pet belongs to another shelter")
        return ref, pet

    def update_pet(self, shelter_id: str, pet_id: str, update_data: Dict[str, Any]) -> Dict[str, Any]:
        """
        [트랜잭션] 반려동물 정보를 부분 업데이트합니다.
        age/labels/health_status는 저장된 값 위에 병합하므로 보내지 않은 하위 필드는 유지됩니다.
        """
        if not update_data:
            raise ValueError("No fields to update")
        transaction = self.db.transaction()

        @firestore.transactional
        def _update_in_transaction(transaction: Transaction):
            ref, pet = self._get_owned_pet(shelter_id, pet_id, transaction=transaction)
            if pet.get('adoption_status') == AdoptionStatus.ADOPTED.value and 'adoption_status' in update_data:
                raise ValueError("Adopted pets cannot change adoption status")

            update = dict(update_data)
            for field in MERGED_FIELDS:
                if field in update:
                    update[field] = {**(pet.get(field) or {}), **update[field]}
            update = DateTimeUtils.for_firestore(update)
            update['updated_at'] = DateTimeUtils.now()
            transaction.update(ref, update)
            pet.update(update)
            return pet

        pet = _update_in_transaction(transaction)
        logging.info(f"Pet {pet_id} updated by shelter {shelter_id} with fields: {list(update_data.keys())}")
        return pet

    def delete_pet(self, shelter_id: str, pet_id: str) -> int:
        """
        [트랜잭션] 반려동물 삭제, shelter.pets 정리, 해당 반려동물의 Pending 요청 삭제를 한 번에 처리합니다.
        삭제된 Pending 요청 수를 반환합니다.
        """
        transaction = self.db.transaction()
        shelter_ref = self.shelters_ref.document(shelter_id)

        @firestore.transactional
        def _delete_in_transaction(transaction: Transaction):
            pet_ref, _ = self._get_owned_pet(shelter_id, pet_id, transaction=transaction)
            shelter = snapshot_to_dict(shelter_ref.get(transaction=transaction)) or {}
            pending = list(self.requests_ref
                           .where('pet_id', '==', pet_id)
                           .where('status', '==', RequestStatus.PENDING.value)
                           .stream(transaction=transaction))

            transaction.delete(pet_ref)
            if shelter:
                transaction.update(shelter_ref, {'pets': [p for p in shelter.get('pets') or [] if p != pet_id]})
            for snapshot in pending:
                transaction.delete(snapshot.reference)
            return len(pending)

        removed = _delete_in_transaction(transaction)
        logging.info(f"Pet {pet_id} deleted by shelter {shelter_id}; removed {removed} pending requests")
        return removed

    # ================== 매칭 ==================
    def match_pets(self, adopter_id: str) -> Optional[List[Dict[str, Any]]]:
        """
        입양자 선호도로 Available 반려동물의 궁합 점수를 계산해 내림차순으로 반환합니다.
        선호도가 완성되지 않았으면 None을 반환합니다.
        """
        adopter = snapshot_to_dict(self.adopters_ref.document(adopter_id).get())
        if adopter is None:
            raise FileNotFoundError("Adopter not found")
        prefs = adopter.get('preferences') or {}
        if not preferences_complete(prefs):
            return None

        pets = self.list_available_pets()
        by_id = {p['pet_id']: p for p in pets}
        ranked = rank_pets([Pet.from_dict(p) for p in pets], prefs)
        result = []
        for pet, score in ranked:
            pet_dict = by_id[pet.pet_id]
            pet_dict['compatibility_score'] = score
            result.append(pet_dict)
        return result
