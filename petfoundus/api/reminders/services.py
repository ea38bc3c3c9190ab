# petfoundus/api/reminders/services.py
"""
입양 후 케어 리마인더 서비스

- 입양 승인 트랜잭션 안에서 (pet, adopter) 단위 리마인더를 삭제 후 재생성합니다.
- 템플릿이 도입되기 전에 입양된 반려동물을 위한 백필(backfill) 배치 작업을 제공합니다.
- 보호소별 리마인더 템플릿 CRUD를 담당합니다.
"""
import logging
import uuid
from datetime import datetime
from typing import Dict, Any, List, Optional

from firebase_admin import firestore

from petfoundus.models.care_reminder import CareReminder, ReminderStatus, ReminderSource
from petfoundus.models.reminder_template import ReminderTemplate, ReminderCategory
from petfoundus.services.firestore_service import to_document, snapshot_to_dict, stream_dicts
from petfoundus.utils.datetime_utils import DateTimeUtils

logger = logging.getLogger(__name__)

# 신규 보호소용 기본 템플릿
DEFAULT_TEMPLATES = [
    {"title": "Initial Vaccination", "category": ReminderCategory.VACCINATION, "days_after_adoption": 7,
     "description": "Schedule the first vaccination visit with your veterinarian."},
    {"title": "Follow-up Vaccination", "category": ReminderCategory.VACCINATION, "days_after_adoption": 30,
     "description": "Booster shot to complete the initial vaccination course."},
    {"title": "General Health Check", "category": ReminderCategory.HEALTH_CHECK, "days_after_adoption": 14,
     "description": "General check-up to see how your pet is settling in."},
    {"title": "Post-Adoption Health Review", "category": ReminderCategory.HEALTH_CHECK, "days_after_adoption": 60,
     "description": "Review weight, diet and behaviour two months after adoption."},
]


def template_from_dict(data: Dict[str, Any]) -> ReminderTemplate:
    return ReminderTemplate(
        template_id=data['template_id'],
        shelter_id=data['shelter_id'],
        title=data['title'],
        category=ReminderCategory(data['category']),
        days_after_adoption=int(data.get('days_after_adoption') or 0),
        description=data.get('description'),
        active=bool(data.get('active', True)),
    )


def build_reminders(templates: List[ReminderTemplate], pet_id: str, adopter_id: str,
                    shelter_id: str, anchor: datetime) -> List[CareReminder]:
    """
    활성 템플릿마다 리마인더 하나를 만듭니다.
    마감일 = anchor + days_after_adoption, 분류는 항상 템플릿의 category를 따릅니다.
    """
    created_at = DateTimeUtils.now()
    return [
        CareReminder(
            reminder_id=str(uuid.uuid4()),
            pet_id=pet_id,
            adopter_id=adopter_id,
            shelter_id=shelter_id,
            template_id=template.template_id,
            title=template.title,
            description=template.description,
            category=template.category,
            due_date=DateTimeUtils.add_days(anchor, template.days_after_adoption),
            status=ReminderStatus.PENDING,
            created_by=ReminderSource.SYSTEM,
            updated_by=ReminderSource.SYSTEM,
            created_at=created_at,
        )
        for template in templates if template.active
    ]


class CareReminderService:
    """케어 리마인더의 생성, 조회, 완료 처리를 담당하는 서비스."""

    def __init__(self):
        self.db = firestore.client()
        self.reminders_ref = self.db.collection('care_reminders')
        self.templates_ref = self.db.collection('reminder_templates')
        self.adopters_ref = self.db.collection('adopters')
        self.pets_ref = self.db.collection('pets')
        logging.info("CareReminderService initialized.")

    # ------------------------------------------------------------------
    # 입양 승인 트랜잭션에서 사용하는 헬퍼 (읽기 -> 쓰기 순서를 지켜야 함)
    # ------------------------------------------------------------------
    def load_active_templates(self, shelter_id: str, transaction=None) -> List[ReminderTemplate]:
        query = self.templates_ref.where('shelter_id', '==', shelter_id).where('active', '==', True)
        return [template_from_dict(d) for d in stream_dicts(query, transaction=transaction)]

    def load_pair_reminder_refs(self, pet_id: str, adopter_id: str, transaction=None) -> list:
        query = self.reminders_ref.where('pet_id', '==', pet_id).where('adopter_id', '==', adopter_id)
        snapshots = query.stream(transaction=transaction) if transaction is not None else query.stream()
        return [snapshot.reference for snapshot in snapshots]

    def replace_reminders_transactional(self, transaction, stale_refs: list,
                                        reminders: List[CareReminder]) -> None:
        """기존 (pet, adopter) 리마인더를 모두 지우고 새 리마인더를 기록합니다."""
        for ref in stale_refs:
            transaction.delete(ref)
        for reminder in reminders:
            transaction.set(self.reminders_ref.document(reminder.reminder_id), to_document(reminder))

    # ------------------------------------------------------------------
    # 백필
    # ------------------------------------------------------------------
    def backfill(self) -> Dict[str, int]:
        """
        모든 입양자의 adopted_pets를 순회하며 리마인더가 없는 반려동물에게 리마인더를 생성합니다.
        이미 리마인더가 있는 반려동물은 건너뛰므로 여러 번 실행해도 결과가 같습니다.
        """
        summary = {"created": 0, "skipped_existing": 0, "skipped_no_templates": 0}
        template_cache: Dict[str, List[ReminderTemplate]] = {}

        for adopter in stream_dicts(self.adopters_ref):
            adopter_id = adopter.get('adopter_id')
            for entry in adopter.get('adopted_pets') or []:
                pet_id = entry.get('pet_id')
                if not pet_id:
                    continue

                existing = next(iter(self.reminders_ref.where('pet_id', '==', pet_id).limit(1).stream()), None)
                if existing is not None:
                    summary["skipped_existing"] += 1
                    continue

                shelter_id = entry.get('shelter_id') or self._shelter_of_pet(pet_id)
                if shelter_id not in template_cache:
                    template_cache[shelter_id] = self.load_active_templates(shelter_id) if shelter_id else []
                templates = template_cache[shelter_id]
                if not templates:
                    logger.info(f"Backfill: no active templates for shelter {shelter_id}, skipping pet {pet_id}")
                    summary["skipped_no_templates"] += 1
                    continue

                anchor = DateTimeUtils.coerce_optional(entry.get('adoption_date')) or DateTimeUtils.now()
                reminders = build_reminders(templates, pet_id, adopter_id, shelter_id, anchor)
                batch = self.db.batch()
                for reminder in reminders:
                    batch.set(self.reminders_ref.document(reminder.reminder_id), to_document(reminder))
                batch.commit()
                summary["created"] += len(reminders)
                logger.info(f"Backfill: created {len(reminders)} reminders for pet {pet_id} (adopter {adopter_id})")

        logger.info(f"Backfill finished: {summary}")
        return summary

    def _shelter_of_pet(self, pet_id: str) -> Optional[str]:
        pet = snapshot_to_dict(self.pets_ref.document(pet_id).get())
        return pet.get('shelter_id') if pet else None

    # ------------------------------------------------------------------
    # 조회 및 상태 변경
    # ------------------------------------------------------------------
    def list_for_pet(self, pet_id: str, adopter_id: Optional[str] = None,
                     shelter_id: Optional[str] = None) -> List[Dict[str, Any]]:
        """비활성(Disabled) 리마인더를 제외하고 마감일 오름차순으로 반환합니다."""
        query = self.reminders_ref.where('pet_id', '==', pet_id)
        if adopter_id:
            query = query.where('adopter_id', '==', adopter_id)
        if shelter_id:
            query = query.where('shelter_id', '==', shelter_id)
        reminders = [r for r in stream_dicts(query) if r.get('status') != ReminderStatus.DISABLED.value]
        return sorted(reminders, key=lambda r: r['due_date'])

    def preview_for_adopter(self, adopter_id: str, limit: int = 5) -> List[Dict[str, Any]]:
        """대시보드용: 가장 가까운 Pending 리마인더 최대 limit개."""
        query = (self.reminders_ref
                 .where('adopter_id', '==', adopter_id)
                 .where('status', '==', ReminderStatus.PENDING.value))
        return sorted(stream_dicts(query), key=lambda r: r['due_date'])[:limit]

    def _get_reminder(self, reminder_id: str):
        ref = self.reminders_ref.document(reminder_id)
        data = snapshot_to_dict(ref.get())
        if data is None:
            raise FileNotFoundError("Reminder not found")
        return ref, data

    def complete_reminder(self, reminder_id: str, adopter_id: str) -> Dict[str, Any]:
        ref, data = self._get_reminder(reminder_id)
        if data.get('adopter_id') != adopter_id:
            raise PermissionError("You can only complete your own reminders")
        if data.get('status') == ReminderStatus.DISABLED.value:
            raise ValueError("Disabled reminders cannot be completed")

        update = {
            'status': ReminderStatus.COMPLETED.value,
            'completed_at': DateTimeUtils.now(),
            'updated_by': ReminderSource.SYSTEM.value,
        }
        ref.update(update)
        logger.info(f"Reminder {reminder_id} completed by adopter {adopter_id}")
        data.update(update)
        return data

    def update_by_shelter(self, reminder_id: str, shelter_id: str, update_data: Dict[str, Any]) -> Dict[str, Any]:
        """보호소가 마감일/메모/상태를 직접 조정합니다."""
        ref, data = self._get_reminder(reminder_id)
        if data.get('shelter_id') != shelter_id:
            raise PermissionError("This reminder belongs to another shelter")
        if not update_data:
            raise ValueError("No fields to update")

        update = DateTimeUtils.for_firestore(dict(update_data))
        if update.get('status') == ReminderStatus.COMPLETED.value and not data.get('completed_at'):
            update['completed_at'] = DateTimeUtils.now()
        elif 'status' in update and update['status'] != ReminderStatus.COMPLETED.value:
            update['completed_at'] = None
        update['updated_by'] = ReminderSource.SHELTER.value
        ref.update(update)
        logger.info(f"Reminder {reminder_id} updated by shelter {shelter_id}: {list(update_data.keys())}")
        data.update(update)
        return data


class ReminderTemplateService:
    """보호소별 리마인더 템플릿 관리 서비스."""

    def __init__(self):
        self.db = firestore.client()
        self.templates_ref = self.db.collection('reminder_templates')

    def list_templates(self, shelter_id: str) -> List[Dict[str, Any]]:
        templates = stream_dicts(self.templates_ref.where('shelter_id', '==', shelter_id))
        return sorted(templates, key=lambda t: (t.get('days_after_adoption', 0), t.get('title', '')))

    def create_template(self, shelter_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        template = ReminderTemplate(
            template_id=str(uuid.uuid4()),
            shelter_id=shelter_id,
            title=data['title'],
            category=ReminderCategory(data['category']),
            days_after_adoption=data['days_after_adoption'],
            description=data.get('description'),
            active=data.get('active', True),
        )
        doc = to_document(template)
        self.templates_ref.document(template.template_id).set(doc)
        logger.info(f"Reminder template {template.template_id} created for shelter {shelter_id}")
        return doc

    def _get_owned(self, shelter_id: str, template_id: str):
        ref = self.templates_ref.document(template_id)
        data = snapshot_to_dict(ref.get())
        if data is None:
            raise FileNotFoundError("Reminder template not found")
        if data.get('shelter_id') != shelter_id:
            raise PermissionError("This template belongs to another shelter")
        return ref, data

    def update_template(self, shelter_id: str, template_id: str, update_data: Dict[str, Any]) -> Dict[str, Any]:
        if not update_data:
            raise ValueError("No fields to update")
        ref, data = self._get_owned(shelter_id, template_id)
        ref.update(update_data)
        data.update(update_data)
        return data

    def delete_template(self, shelter_id: str, template_id: str) -> None:
        ref, _ = self._get_owned(shelter_id, template_id)
        ref.delete()
        logger.info(f"Reminder template {template_id} deleted by shelter {shelter_id}")

    def seed_defaults(self, shelter_id: str) -> List[Dict[str, Any]]:
        """보호소의 템플릿을 기본 템플릿 4개로 교체합니다."""
        batch = self.db.batch()
        for snapshot in self.templates_ref.where('shelter_id', '==', shelter_id).stream():
            batch.delete(snapshot.reference)

        created = []
        for default in DEFAULT_TEMPLATES:
            template = ReminderTemplate(template_id=str(uuid.uuid4()), shelter_id=shelter_id, **default)
            doc = to_document(template)
            batch.set(self.templates_ref.document(template.template_id), doc)
            created.append(doc)
        batch.commit()
        logger.info(f"Seeded {len(created)} default reminder templates for shelter {shelter_id}")
        return created
