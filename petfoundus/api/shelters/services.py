# petfoundus/api/shelters/services.py
import logging
import uuid
from typing import Dict, Any, Optional
from firebase_admin import firestore
from firebase_admin.firestore import Transaction

from petfoundus.core.security import hash_password, verify_password, ROLE_SHELTER
from petfoundus.models.shelter import Shelter
from petfoundus.models.pet import AdoptionStatus
from petfoundus.services.firestore_service import (
    to_document, snapshot_to_dict, email_claim_id, ACCOUNT_EMAILS_COLLECTION
)
from petfoundus.api.pets.services import PetService, public_shelter
from petfoundus.api.adoption_requests.services import AdoptionRequestService


class ShelterService:
    """보호소 계정, 프로필, 대시보드 통계를 담당하는 서비스."""

    def __init__(self, pet_service: PetService, request_service: AdoptionRequestService):
        self.db = firestore.client()
        self.shelters_ref = self.db.collection('shelters')
        self.emails_ref = self.db.collection(ACCOUNT_EMAILS_COLLECTION)
        self.pet_service = pet_service
        self.request_service = request_service

    def _email_query(self, email: str):
        return self.shelters_ref.where('email', '==', email).limit(1)

    def _find_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        snapshot = next(iter(self._email_query(email).stream()), None)
        return snapshot_to_dict(snapshot)

    def create_shelter(self, name: str, email: str, password: str,
                       phone: Optional[str] = None, location: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """[트랜잭션] 보호소 계정을 생성합니다. (관리용 스크립트에서 사용)"""
        email = email.strip().lower()
        shelter = Shelter(
            shelter_id=str(uuid.uuid4()),
            name=name,
            email=email,
            password_hash=hash_password(password),
            phone=phone,
            location=location or {},
        )
        doc = to_document(shelter)
        transaction = self.db.transaction()
        claim_ref = self.emails_ref.document(email_claim_id(ROLE_SHELTER, email))

        @firestore.transactional
        def _create_in_transaction(transaction: Transaction):
            if claim_ref.get(transaction=transaction).exists:
                raise ValueError("Email already registered")
            if list(self._email_query(email).stream(transaction=transaction)):
                raise ValueError("Email already registered")
            transaction.set(claim_ref, {"email": email, "shelter_id": shelter.shelter_id})
            transaction.set(self.shelters_ref.document(shelter.shelter_id), doc)

        _create_in_transaction(transaction)
        logging.info(f"Shelter created: {shelter.shelter_id} ({name})")
        return doc

    def authenticate(self, email: str, password: str) -> Optional[Dict[str, Any]]:
        shelter = self._find_by_email(email)
        if not shelter or not verify_password(password, shelter.get('password_hash')):
            return None
        return shelter

    def get_shelter(self, shelter_id: str) -> Dict[str, Any]:
        """[공개용] 비밀번호 해시를 제외한 보호소 정보."""
        shelter = snapshot_to_dict(self.shelters_ref.document(shelter_id).get())
        if shelter is None:
            raise FileNotFoundError("Shelter not found")
        return public_shelter(shelter)

    def update_profile(self, shelter_id: str, update_data: Dict[str, Any]) -> Dict[str, Any]:
        if not update_data:
            raise ValueError("No fields to update")
        ref = self.shelters_ref.document(shelter_id)
        shelter = snapshot_to_dict(ref.get())
        if shelter is None:
            raise FileNotFoundError("Shelter not found")

        update = dict(update_data)
        if 'location' in update:
            update['location'] = {**(shelter.get('location') or {}), **update['location']}
        ref.update(update)
        logging.info(f"Shelter profile updated for {shelter_id} with fields: {list(update_data.keys())}")
        shelter.update(update)
        return public_shelter(shelter)

    def get_stats(self, shelter_id: str) -> Dict[str, int]:
        """대시보드 통계: 전체/입양 가능/입양 완료 반려동물 수와 대기 중인 요청 수."""
        pets = self.pet_service.list_shelter_pets(shelter_id)
        statuses = [p.get('adoption_status') for p in pets]
        return {
            "total_pets": len(pets),
            "available_pets": statuses.count(AdoptionStatus.AVAILABLE.value),
            "adopted_pets": statuses.count(AdoptionStatus.ADOPTED.value),
            "pending_requests": self.request_service.count_pending_for_shelter(shelter_id),
        }
