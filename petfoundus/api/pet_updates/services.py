# petfoundus/api/pet_updates/services.py
import logging
import uuid
from typing import Dict, Any, List
from firebase_admin import firestore

from petfoundus.models.pet_update import PetUpdate, PetCondition
from petfoundus.utils.datetime_utils import DateTimeUtils
from petfoundus.utils.image_utils import to_data_url
from petfoundus.services.firestore_service import to_document, snapshot_to_dict, stream_dicts


def update_to_response(update: Dict[str, Any]) -> Dict[str, Any]:
    data = dict(update)
    data['images'] = [to_data_url(img.get('data'), img.get('content_type')) for img in update.get('images') or []]
    return data


class PetUpdateService:
    """입양 후 근황(체중, 상태, 사진) 기록 서비스."""

    def __init__(self):
        self.db = firestore.client()
        self.updates_ref = self.db.collection('pet_updates')
        self.adopters_ref = self.db.collection('adopters')

    def submit_update(self, adopter_id: str, data: Dict[str, Any], images: List[Dict[str, Any]]) -> Dict[str, Any]:
        """입양자가 실제로 입양한 반려동물에 대해서만 근황을 등록할 수 있습니다."""
        adopter = snapshot_to_dict(self.adopters_ref.document(adopter_id).get())
        if adopter is None:
            raise FileNotFoundError("Adopter not found")
        adopted = {entry.get('pet_id'): entry for entry in adopter.get('adopted_pets') or []}
        entry = adopted.get(data['pet_id'])
        if entry is None:
            raise PermissionError("You can only post updates for pets you have adopted")
        if entry.get('shelter_id') and entry['shelter_id'] != data['shelter_id']:
            raise PermissionError("This pet was adopted from another shelter")

        update = PetUpdate(
            update_id=str(uuid.uuid4()),
            pet_id=data['pet_id'],
            adopter_id=adopter_id,
            shelter_id=data['shelter_id'],
            notes=data['notes'],
            weight=data.get('weight'),
            condition=PetCondition(data['condition']) if data.get('condition') else None,
            images=images,
            created_at=DateTimeUtils.now(),
        )
        doc = to_document(update)
        self.updates_ref.document(update.update_id).set(doc)
        logging.info(f"Pet update {update.update_id} posted for pet {update.pet_id} by adopter {adopter_id}")
        return doc

    def list_for_pet(self, pet_id: str) -> List[Dict[str, Any]]:
        updates = stream_dicts(self.updates_ref.where('pet_id', '==', pet_id))
        return sorted(updates, key=lambda u: u['created_at'], reverse=True)
