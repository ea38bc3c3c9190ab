# petfoundus/api/adopters/services.py
import logging
import uuid
from typing import Dict, Any, Optional
from firebase_admin import firestore
from firebase_admin.firestore import Transaction

from petfoundus.core.security import hash_password, verify_password, ROLE_ADOPTER
from petfoundus.models.adopter import Adopter, default_preferences
from petfoundus.utils.datetime_utils import DateTimeUtils
from petfoundus.services.firestore_service import (
    to_document, snapshot_to_dict, get_dicts_by_ids, email_claim_id, ACCOUNT_EMAILS_COLLECTION
)


class AdopterService:
    """입양자 계정(가입/로그인)과 프로필 관리를 담당하는 서비스."""

    def __init__(self):
        self.db = firestore.client()
        self.adopters_ref = self.db.collection('adopters')
        self.pets_ref = self.db.collection('pets')
        self.emails_ref = self.db.collection(ACCOUNT_EMAILS_COLLECTION)

    def _email_query(self, email: str):
        return self.adopters_ref.where('email', '==', email).limit(1)

    def _find_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        snapshot = next(iter(self._email_query(email).stream()), None)
        return snapshot_to_dict(snapshot)

    def register(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        [트랜잭션] 신규 입양자를 등록합니다. 이메일이 이미 있으면 ValueError.
        이메일 점유 문서를 같은 트랜잭션에서 만들어 동시 가입도 한 건만 성공합니다.
        """
        now = DateTimeUtils.now()
        adopter = Adopter(
            adopter_id=str(uuid.uuid4()),
            email=data['email'],
            password_hash=hash_password(data['password']),
            full_name=data['full_name'].strip(),
            phone=data['phone'],
            created_at=now,
            updated_at=now,
        )
        doc = to_document(adopter)
        transaction = self.db.transaction()
        claim_ref = self.emails_ref.document(email_claim_id(ROLE_ADOPTER, adopter.email))

        @firestore.transactional
        def _register_in_transaction(transaction: Transaction):
            if claim_ref.get(transaction=transaction).exists:
                raise ValueError("Email already registered")
            # 점유 문서가 생기기 전에 가입한 계정
            if list(self._email_query(adopter.email).stream(transaction=transaction)):
                raise ValueError("Email already registered")
            transaction.set(claim_ref, {"email": adopter.email, "adopter_id": adopter.adopter_id})
            transaction.set(self.adopters_ref.document(adopter.adopter_id), doc)

        _register_in_transaction(transaction)
        logging.info(f"New adopter registered: {adopter.adopter_id}")
        return doc

    def authenticate(self, email: str, password: str) -> Optional[Dict[str, Any]]:
        """이메일/비밀번호가 맞으면 입양자 문서를, 아니면 None을 반환합니다."""
        adopter = self._find_by_email(email)
        if not adopter or not adopter.get('is_active', True):
            return None
        if not verify_password(password, adopter.get('password_hash')):
            return None
        return adopter

    def get_adopter(self, adopter_id: str) -> Dict[str, Any]:
        adopter = snapshot_to_dict(self.adopters_ref.document(adopter_id).get())
        if adopter is None:
            raise FileNotFoundError("Adopter not found")
        return adopter

    def get_profile(self, adopter_id: str) -> Dict[str, Any]:
        """입양한 반려동물의 요약 정보를 붙인 프로필."""
        adopter = self.get_adopter(adopter_id)
        adopted = adopter.get('adopted_pets') or []
        pets = get_dicts_by_ids(self.pets_ref, [entry.get('pet_id') for entry in adopted])
        for entry in adopted:
            pet = pets.get(entry.get('pet_id'))
            entry['pet'] = {
                "pet_id": pet['pet_id'],
                "name": pet.get('name'),
                "species": pet.get('species'),
                "breed": pet.get('breed'),
                "images": pet.get('images') or [],
            } if pet else None
        return adopter

    def update_profile(self, adopter_id: str, update_data: Dict[str, Any]) -> Dict[str, Any]:
        """프로필 부분 업데이트. preferences/address는 기존 값과 병합합니다."""
        if not update_data:
            raise ValueError("No fields to update")
        ref = self.adopters_ref.document(adopter_id)
        adopter = snapshot_to_dict(ref.get())
        if adopter is None:
            raise FileNotFoundError("Adopter not found")

        update = dict(update_data)
        if 'preferences' in update:
            update['preferences'] = {**default_preferences(), **(adopter.get('preferences') or {}), **update['preferences']}
        if 'address' in update:
            update['address'] = {**(adopter.get('address') or {}), **update['address']}
        if 'full_name' in update:
            update['full_name'] = update['full_name'].strip()
        update['updated_at'] = DateTimeUtils.now()

        ref.update(update)
        logging.info(f"Adopter profile updated for {adopter_id} with fields: {list(update_data.keys())}")
        adopter.update(update)
        return adopter
