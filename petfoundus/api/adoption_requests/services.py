# petfoundus/api/adoption_requests/services.py
"""
입양 요청 라이프사이클 서비스

Pending -> Approved | Rejected

승인은 하나의 Firestore 트랜잭션으로 처리됩니다. 요청/반려동물/입양자 갱신,
같은 반려동물의 다른 Pending 요청 거절, 케어 리마인더 재생성 중 하나라도 실패하면
아무것도 반영되지 않습니다.
"""
import logging
import uuid
from typing import Dict, Any, List, Optional
from firebase_admin import firestore
from firebase_admin.firestore import Transaction

from petfoundus.models.adoption_request import AdoptionRequest, RequestStatus, UNRESOLVED_STATUSES
from petfoundus.models.pet import AdoptionStatus
from petfoundus.utils.datetime_utils import DateTimeUtils
from petfoundus.services.firestore_service import to_document, snapshot_to_dict, stream_dicts, get_dicts_by_ids
from petfoundus.api.reminders.services import CareReminderService, build_reminders

logger = logging.getLogger(__name__)


class AdoptionRequestService:
    """입양 요청 생성/취소/조회와 보호소의 승인/거절을 담당하는 서비스."""

    def __init__(self, reminder_service: CareReminderService):
        self.db = firestore.client()
        self.requests_ref = self.db.collection('adoption_requests')
        self.pets_ref = self.db.collection('pets')
        self.adopters_ref = self.db.collection('adopters')
        self.reminder_service = reminder_service
        logging.info("AdoptionRequestService initialized with dependencies.")

    # ================== 입양자 측 ==================
    def create_request(self, adopter_id: str, pet_id: str) -> Dict[str, Any]:
        """[트랜잭션] 검증 후 Pending 요청을 생성합니다."""
        transaction = self.db.transaction()
        pet_ref = self.pets_ref.document(pet_id)
        adopter_ref = self.adopters_ref.document(adopter_id)

        @firestore.transactional
        def _create_in_transaction(transaction: Transaction):
            pet = snapshot_to_dict(pet_ref.get(transaction=transaction))
            if pet is None:
                raise FileNotFoundError("Pet not found")
            if snapshot_to_dict(adopter_ref.get(transaction=transaction)) is None:
                raise FileNotFoundError("Adopter not found")
            if pet.get('adoption_status') != AdoptionStatus.AVAILABLE.value:
                raise ValueError("Pet is not available for adoption")

            existing = stream_dicts(
                self.requests_ref.where('adopter_id', '==', adopter_id).where('pet_id', '==', pet_id),
                transaction=transaction,
            )
            if any(r.get('status') in UNRESOLVED_STATUSES for r in existing):
                raise ValueError("You have already requested this pet")

            new_request = AdoptionRequest(
                request_id=str(uuid.uuid4()),
                adopter_id=adopter_id,
                pet_id=pet_id,
                shelter_id=pet['shelter_id'],
                request_date=DateTimeUtils.now(),
            )
            doc = to_document(new_request)
            transaction.set(self.requests_ref.document(new_request.request_id), doc)
            return doc

        doc = _create_in_transaction(transaction)
        logger.info(f"Adoption request {doc['request_id']} created (adopter: {adopter_id}, pet: {pet_id})")
        return doc

    def cancel_request(self, adopter_id: str, pet_id: str) -> None:
        """
        입양자의 Pending 요청을 삭제합니다.
        요청이 없으면 FileNotFoundError, Pending이 아닌 요청만 있으면 ValueError (변경 없음).
        """
        transaction = self.db.transaction()
        query = (self.requests_ref
                 .where('adopter_id', '==', adopter_id)
                 .where('pet_id', '==', pet_id))

        @firestore.transactional
        def _cancel_in_transaction(transaction: Transaction):
            snapshots = list(query.stream(transaction=transaction))
            if not snapshots:
                raise FileNotFoundError("Adoption request not found")

            pending = [s for s in snapshots if s.to_dict().get('status') == RequestStatus.PENDING.value]
            if not pending:
                raise ValueError("Only pending requests can be cancelled")

            for snapshot in pending:
                transaction.delete(snapshot.reference)

        _cancel_in_transaction(transaction)
        logger.info(f"Adoption request cancelled (adopter: {adopter_id}, pet: {pet_id})")

    def list_for_adopter(self, adopter_id: str) -> List[Dict[str, Any]]:
        """입양자의 요청 목록 (반려동물 요약 포함, 최신순)."""
        requests = stream_dicts(self.requests_ref.where('adopter_id', '==', adopter_id))
        pets = get_dicts_by_ids(self.pets_ref, [r['pet_id'] for r in requests])
        for req in requests:
            pet = pets.get(req['pet_id'])
            req['pet'] = {
                "pet_id": pet['pet_id'],
                "name": pet.get('name'),
                "species": pet.get('species'),
                "breed": pet.get('breed'),
                "images": pet.get('images') or [],
                "adoption_status": pet.get('adoption_status'),
            } if pet else None
        return sorted(requests, key=lambda r: r['request_date'], reverse=True)

    # ================== 보호소 측 ==================
    def list_for_shelter(self, shelter_id: str) -> List[Dict[str, Any]]:
        """보호소가 받은 요청 목록을 입양자/반려동물 정보와 함께 평탄화해 반환합니다."""
        requests = stream_dicts(self.requests_ref.where('shelter_id', '==', shelter_id))
        adopters = get_dicts_by_ids(self.adopters_ref, [r['adopter_id'] for r in requests])
        pets = get_dicts_by_ids(self.pets_ref, [r['pet_id'] for r in requests])

        rows = []
        for req in sorted(requests, key=lambda r: r['request_date'], reverse=True):
            adopter = adopters.get(req['adopter_id']) or {}
            pet = pets.get(req['pet_id']) or {}
            images = pet.get('images') or []
            rows.append({
                "request_id": req['request_id'],
                "adopter_id": req['adopter_id'],
                "adopter_name": adopter.get('full_name'),
                "adopter_email": adopter.get('email'),
                "adopter_phone": adopter.get('phone'),
                "pet_id": req['pet_id'],
                "pet_name": pet.get('name'),
                "pet_image": images[0].get('url') if images else None,
                "status": req['status'],
                "date": req['request_date'],
                "shelter_response": req.get('shelter_response'),
            })
        return rows

    def count_pending_for_shelter(self, shelter_id: str) -> int:
        query = (self.requests_ref
                 .where('shelter_id', '==', shelter_id)
                 .where('status', '==', RequestStatus.PENDING.value))
        return sum(1 for _ in query.stream())

    def clean_ghost_requests(self) -> int:
        """삭제된 반려동물을 가리키는 요청(유령 요청)을 모두 지우고 삭제 수를 반환합니다."""
        existence: Dict[str, bool] = {}
        batch = self.db.batch()
        removed = 0
        for snapshot in self.requests_ref.stream():
            pet_id = snapshot.to_dict().get('pet_id')
            if pet_id not in existence:
                existence[pet_id] = bool(pet_id) and self.pets_ref.document(pet_id).get().exists
            if not existence[pet_id]:
                batch.delete(snapshot.reference)
                removed += 1
        if removed:
            batch.commit()
        logger.info(f"Removed {removed} ghost adoption requests")
        return removed

    def _shelter_response(self, message: Optional[str]) -> Dict[str, Any]:
        return {"message": message, "responded_at": DateTimeUtils.now()}

    def approve_request(self, shelter_id: str, request_id: str, message: Optional[str] = None) -> Dict[str, Any]:
        """
        [트랜잭션] 입양 요청 승인.

        결과 status: SUCCESS | NOT_PENDING
        :raises FileNotFoundError: 요청/반려동물/입양자가 없는 경우
        :raises PermissionError: 다른 보호소의 반려동물인 경우
        :raises ValueError: 반려동물이 이미 입양된 경우
        """
        transaction = self.db.transaction()
        request_ref = self.requests_ref.document(request_id)

        @firestore.transactional
        def _approve_in_transaction(transaction: Transaction):
            # ---- 읽기 ----
            req = snapshot_to_dict(request_ref.get(transaction=transaction))
            if req is None:
                raise FileNotFoundError("Adoption request not found")
            if req.get('status') != RequestStatus.PENDING.value:
                return {"status": "NOT_PENDING"}

            pet_id, adopter_id = req['pet_id'], req['adopter_id']
            pet_ref = self.pets_ref.document(pet_id)
            pet = snapshot_to_dict(pet_ref.get(transaction=transaction))
            if pet is None:
                raise FileNotFoundError("Pet not found")
            if pet.get('shelter_id') != shelter_id:
                raise PermissionError("This pet belongs to another shelter")
            if pet.get('adoption_status') == AdoptionStatus.ADOPTED.value:
                raise ValueError("Pet has already been adopted")

            adopter_ref = self.adopters_ref.document(adopter_id)
            adopter = snapshot_to_dict(adopter_ref.get(transaction=transaction))
            if adopter is None:
                raise FileNotFoundError("Adopter not found")

            siblings = [
                snapshot.reference
                for snapshot in self.requests_ref
                .where('pet_id', '==', pet_id)
                .where('status', '==', RequestStatus.PENDING.value)
                .stream(transaction=transaction)
                if snapshot.id != request_id
            ]
            templates = self.reminder_service.load_active_templates(shelter_id, transaction=transaction)
            stale_reminders = self.reminder_service.load_pair_reminder_refs(pet_id, adopter_id, transaction=transaction)

            # ---- 쓰기 ----
            now = DateTimeUtils.now()
            transaction.update(request_ref, {
                'status': RequestStatus.APPROVED.value,
                'shelter_response': self._shelter_response(message),
            })
            transaction.update(pet_ref, {
                'adoption_status': AdoptionStatus.ADOPTED.value,
                'adopted_by': adopter_id,
                'adoption_date': now,
                'updated_at': now,
            })
            adopted_pets = [p for p in adopter.get('adopted_pets') or [] if p.get('pet_id') != pet_id]
            adopted_pets.append({'pet_id': pet_id, 'shelter_id': shelter_id, 'adoption_date': now})
            transaction.update(adopter_ref, {'adopted_pets': adopted_pets, 'updated_at': now})

            for sibling_ref in siblings:
                transaction.update(sibling_ref, {
                    'status': RequestStatus.REJECTED.value,
                    'shelter_response': {"message": "Another adoption request for this pet was approved",
                                         "responded_at": now},
                })

            reminders = build_reminders(templates, pet_id, adopter_id, shelter_id, anchor=now)
            self.reminder_service.replace_reminders_transactional(transaction, stale_reminders, reminders)
            return {
                "status": "SUCCESS",
                "request_id": request_id,
                "pet_id": pet_id,
                "adopter_id": adopter_id,
                "rejected_requests": len(siblings),
                "reminders_created": len(reminders),
            }

        result = _approve_in_transaction(transaction)
        if result["status"] == "SUCCESS":
            logger.info(f"Adoption request {request_id} approved by shelter {shelter_id}: "
                        f"{result['rejected_requests']} sibling requests rejected, "
                        f"{result['reminders_created']} reminders created")
        else:
            logger.warning(f"Approve skipped for request {request_id}: status is not Pending")
        return result

    def reject_request(self, shelter_id: str, request_id: str, message: Optional[str] = None) -> Dict[str, Any]:
        """[트랜잭션] 해당 요청만 Rejected로 변경합니다. 반려동물과 다른 요청은 그대로입니다."""
        transaction = self.db.transaction()
        request_ref = self.requests_ref.document(request_id)

        @firestore.transactional
        def _reject_in_transaction(transaction: Transaction):
            req = snapshot_to_dict(request_ref.get(transaction=transaction))
            if req is None:
                raise FileNotFoundError("Adoption request not found")
            if req.get('status') != RequestStatus.PENDING.value:
                return {"status": "NOT_PENDING"}

            pet = snapshot_to_dict(self.pets_ref.document(req['pet_id']).get(transaction=transaction))
            owner = pet.get('shelter_id') if pet else req.get('shelter_id')
            if owner != shelter_id:
                raise PermissionError("This pet belongs to another shelter")

            transaction.update(request_ref, {
                'status': RequestStatus.REJECTED.value,
                'shelter_response': self._shelter_response(message),
            })
            return {"status": "SUCCESS", "request_id": request_id}

        result = _reject_in_transaction(transaction)
        if result["status"] == "SUCCESS":
            logger.info(f"Adoption request {request_id} rejected by shelter {shelter_id}")
        return result
