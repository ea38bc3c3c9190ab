# petfoundus/api/reports/services.py
"""
유기동물 목격 신고 서비스

신고 접수/조회/상태 변경과, 보호소가 신고된 동물을 구조해
입양 가능한 반려동물로 등록하는 구조(rescue) 처리를 담당합니다.
"""
import logging
import uuid
from typing import Dict, Any, List, Optional
from firebase_admin import firestore
from firebase_admin.firestore import Transaction

from petfoundus.models.report import Report, ReportStatus
from petfoundus.models.pet import Species
from petfoundus.utils.datetime_utils import DateTimeUtils
from petfoundus.utils.image_utils import to_data_url
from petfoundus.services.firestore_service import to_document, snapshot_to_dict, stream_dicts
from petfoundus.api.pets.services import PetService

logger = logging.getLogger(__name__)

# 반려동물 이미지로 복사할 data URL의 최대 길이 (Firestore 문서 1MiB 한도)
MAX_COPIED_PHOTO_URL_LENGTH = 700 * 1024


def report_to_response(report: Dict[str, Any]) -> Dict[str, Any]:
    """바이너리 사진을 data URL로 바꾼 응답용 딕셔너리."""
    data = {k: v for k, v in report.items() if k not in ('photo', 'photo_content_type')}
    data['photo_url'] = to_data_url(report.get('photo'), report.get('photo_content_type'))
    return data


class ReportService:
    def __init__(self, pet_service: PetService):
        self.db = firestore.client()
        self.reports_ref = self.db.collection('reports')
        self.shelters_ref = self.db.collection('shelters')
        self.pet_service = pet_service
        logging.info("ReportService initialized with dependencies.")

    def submit_report(self, reporter_id: str, data: Dict[str, Any],
                      photo: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        now = DateTimeUtils.now()
        report = Report(
            report_id=str(uuid.uuid4()),
            reported_by=reporter_id,
            animal_type=data['animal_type'],
            number=data['number'],
            condition=data['condition'],
            animal_desc=data['animal_desc'],
            place_desc=data['place_desc'],
            pin={"lat": data['pin_lat'], "lng": data['pin_lng']},
            photo=photo['data'] if photo else None,
            photo_content_type=photo['content_type'] if photo else None,
            created_at=now,
            updated_at=now,
        )
        doc = to_document(report)
        self.reports_ref.document(report.report_id).set(doc)
        logger.info(f"Stray report {report.report_id} submitted by {reporter_id} ({report.animal_type} x{report.number})")
        return doc

    def list_reports(self, reporter_id: Optional[str] = None) -> List[Dict[str, Any]]:
        """신고 목록 (최신순). reporter_id가 주어지면 해당 사용자의 신고만."""
        query = self.reports_ref
        if reporter_id:
            query = query.where('reported_by', '==', reporter_id)
        return sorted(stream_dicts(query), key=lambda r: r['created_at'], reverse=True)

    def get_report(self, report_id: str) -> Dict[str, Any]:
        report = snapshot_to_dict(self.reports_ref.document(report_id).get())
        if report is None:
            raise FileNotFoundError("Report not found")
        return report

    def update_status(self, report_id: str, status: str) -> Dict[str, Any]:
        """신고 상태 변경. Rescued 전환은 rescue_report로만 가능합니다."""
        report = self.get_report(report_id)
        if report.get('status') == ReportStatus.RESCUED.value:
            raise ValueError("Report has already been rescued")
        update = {'status': status, 'updated_at': DateTimeUtils.now()}
        self.reports_ref.document(report_id).update(update)
        logger.info(f"Report {report_id} status changed to {status}")
        report.update(update)
        return report

    def delete_report(self, report_id: str, actor_id: str, is_shelter: bool) -> None:
        report = self.get_report(report_id)
        if not is_shelter and report.get('reported_by') != actor_id:
            raise PermissionError("You can only delete your own reports")
        self.reports_ref.document(report_id).delete()
        logger.info(f"Report {report_id} deleted by {actor_id}")

    @staticmethod
    def _rescued_pet_data(report: Dict[str, Any], pet_data: Dict[str, Any]) -> Dict[str, Any]:
        """신고 내용(설명, 사진)을 복사해 반려동물 등록 데이터를 만듭니다."""
        animal_type = (report.get('animal_type') or '').strip().capitalize()
        species = pet_data.get('species') or (
            animal_type if animal_type in [e.value for e in Species] else Species.DOG.value)
        description = (
            f"Rescued stray. {report.get('animal_desc', '').strip()} "
            f"Found at: {report.get('place_desc', '').strip()}"
        ).strip()

        images = []
        photo_url = to_data_url(report.get('photo'), report.get('photo_content_type'))
        if photo_url and len(photo_url) <= MAX_COPIED_PHOTO_URL_LENGTH:
            images.append({"url": photo_url, "caption": "Photo from stray report"})
        elif photo_url:
            logger.warning(f"Report {report.get('report_id')} photo is too large to copy into the pet document")

        return {
            "name": pet_data['name'],
            "species": species,
            "breed": pet_data.get('breed'),
            "gender": pet_data['gender'],
            "size": pet_data.get('size'),
            "age": {"years": pet_data.get('age_years', 0), "months": pet_data.get('age_months', 0)},
            "images": images,
            "description": description[:1000],
        }

    def rescue_report(self, report_id: str, shelter_id: str, pet_data: Dict[str, Any]) -> Dict[str, Any]:
        """
        [트랜잭션] 신고된 동물을 구조 처리합니다.
        보호소 소속 Available 반려동물 생성 + shelter.pets 추가 + 신고 상태 Rescued.
        생성된 반려동물과 신고 사이의 연결은 남기지 않습니다.
        """
        transaction = self.db.transaction()
        report_ref = self.reports_ref.document(report_id)
        shelter_ref = self.shelters_ref.document(shelter_id)

        @firestore.transactional
        def _rescue_in_transaction(transaction: Transaction):
            report = snapshot_to_dict(report_ref.get(transaction=transaction))
            if report is None:
                raise FileNotFoundError("Report not found")
            if report.get('status') == ReportStatus.RESCUED.value:
                raise ValueError("Report has already been rescued")
            shelter = snapshot_to_dict(shelter_ref.get(transaction=transaction))
            if shelter is None:
                raise FileNotFoundError("Shelter not found")

            new_pet = self.pet_service.build_pet(shelter_id, self._rescued_pet_data(report, pet_data))
            pet_doc = self.pet_service.add_pet_transactional(transaction, shelter_ref, shelter, new_pet)
            transaction.update(report_ref, {'status': ReportStatus.RESCUED.value, 'updated_at': DateTimeUtils.now()})
            return pet_doc

        pet_doc = _rescue_in_transaction(transaction)
        logger.info(f"Report {report_id} rescued by shelter {shelter_id} as pet {pet_doc['pet_id']}")
        return pet_doc
