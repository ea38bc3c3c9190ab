# petfoundus/conftest.py
"""
공용 pytest 픽스처.

- Firestore 클라이언트를 메모리 기반 테스트 더블로 교체합니다.
  트랜잭션 쓰기는 버퍼링되었다가 커밋 시 반영되고, 예외가 발생하면 버려집니다.
  트랜잭션이 읽은 문서가 커밋 전에 바뀌면 Aborted로 실패하고 재시도됩니다.
- 시각 고정, JWT 헤더 생성, 테스트 데이터 시딩 헬퍼를 제공합니다.
"""
import copy
import uuid
from datetime import datetime, timezone

import firebase_admin
import pytest
from firebase_admin import firestore
from google.api_core.exceptions import Aborted

from petfoundus.utils.datetime_utils import DateTimeUtils

FIXED_NOW = datetime(2025, 3, 1, 9, 0, tzinfo=timezone.utc)
MAX_TRANSACTION_ATTEMPTS = 5


# =====================================================================================
# 메모리 기반 Firestore 테스트 더블
# =====================================================================================
class FakeSnapshot:
    def __init__(self, reference, data):
        self.reference = reference
        self.id = reference.id
        self._data = data

    @property
    def exists(self):
        return self._data is not None

    def to_dict(self):
        return copy.deepcopy(self._data) if self._data is not None else None


class FakeDocumentReference:
    def __init__(self, db, collection_name, doc_id):
        self._db = db
        self._collection = collection_name
        self.id = doc_id

    @property
    def path(self):
        return f"{self._collection}/{self.id}"

    def _store(self):
        return self._db.store.setdefault(self._collection, {})

    def get(self, transaction=None, **kwargs):
        if transaction is not None:
            transaction._check_read()
            transaction._record_read(self.path)
        return FakeSnapshot(self, copy.deepcopy(self._store().get(self.id)))

    def _touch(self):
        self._db.versions[self.path] = self._db.versions.get(self.path, 0) + 1

    def set(self, data, merge=False):
        if merge and self.id in self._store():
            self._store()[self.id].update(copy.deepcopy(data))
        else:
            self._store()[self.id] = copy.deepcopy(data)
        self._touch()

    def update(self, data):
        if self.id not in self._store():
            raise KeyError(f"No document to update: {self.path}")
        self._store()[self.id].update(copy.deepcopy(data))
        self._touch()

    def delete(self):
        self._store().pop(self.id, None)
        self._touch()


class FakeQuery:
    _OPS = {
        '==': lambda a, b: a == b,
        '!=': lambda a, b: a != b,
        '<': lambda a, b: a is not None and a < b,
        '<=': lambda a, b: a is not None and a <= b,
        '>': lambda a, b: a is not None and a > b,
        '>=': lambda a, b: a is not None and a >= b,
        'in': lambda a, b: a in b,
        'not-in': lambda a, b: a not in b,
        'array_contains': lambda a, b: isinstance(a, list) and b in a,
    }

    def __init__(self, db, collection_name, filters=None, orders=None, limit_count=None):
        self._db = db
        self._collection = collection_name
        self._filters = filters or []
        self._orders = orders or []
        self._limit = limit_count

    def _copy(self, **changes):
        params = dict(filters=list(self._filters), orders=list(self._orders), limit_count=self._limit)
        params.update(changes)
        return FakeQuery(self._db, self._collection, **params)

    def where(self, field_path, op_string, value):
        if op_string not in self._OPS:
            raise ValueError(f"Unsupported operator in fake query: {op_string}")
        return self._copy(filters=self._filters + [(field_path, op_string, value)])

    def order_by(self, field_path, direction="ASCENDING"):
        return self._copy(orders=self._orders + [(field_path, direction)])

    def limit(self, count):
        return self._copy(limit_count=count)

    def stream(self, transaction=None, **kwargs):
        if transaction is not None:
            transaction._check_read()
        store = self._db.store.get(self._collection, {})
        rows = []
        for doc_id, data in store.items():
            if all(field in data and self._OPS[op](data.get(field), value)
                   for field, op, value in self._filters):
                rows.append((doc_id, data))
        for field, direction in reversed(self._orders):
            rows.sort(key=lambda row: (row[1].get(field) is None, row[1].get(field)),
                      reverse=(direction == "DESCENDING"))
        if self._limit is not None:
            rows = rows[:self._limit]
        for doc_id, data in rows:
            ref = FakeDocumentReference(self._db, self._collection, doc_id)
            if transaction is not None:
                transaction._record_read(ref.path)
            yield FakeSnapshot(ref, copy.deepcopy(data))

    def get(self, transaction=None, **kwargs):
        return list(self.stream(transaction=transaction))


class FakeCollectionReference(FakeQuery):
    def __init__(self, db, collection_name):
        super().__init__(db, collection_name)
        self.id = collection_name

    def document(self, document_id=None):
        return FakeDocumentReference(self._db, self._collection, document_id or uuid.uuid4().hex)


class FakeWriteBatch:
    def __init__(self, db):
        self._db = db
        self._writes = []

    def set(self, reference, data, merge=False):
        self._writes.append(lambda: reference.set(data, merge=merge))

    def update(self, reference, data):
        self._writes.append(lambda: reference.update(data))

    def delete(self, reference):
        self._writes.append(reference.delete)

    def commit(self):
        writes, self._writes = self._writes, []
        for write in writes:
            write()
        self._db.commits += 1


class FakeTransaction(FakeWriteBatch):
    """
    Firestore 규칙과 동일하게 쓰기 이후의 읽기를 금지합니다.
    읽은 문서의 버전을 기억해 두고, 커밋 시점에 달라졌으면 Aborted를 발생시킵니다.
    """

    def __init__(self, db):
        super().__init__(db)
        self._reads = {}

    def _check_read(self):
        if self._writes:
            raise RuntimeError("Firestore transactions require all reads to be executed before all writes.")

    def _record_read(self, path):
        self._reads.setdefault(path, self._db.versions.get(path, 0))

    def commit(self):
        changed = [path for path, version in self._reads.items() if self._db.versions.get(path, 0) != version]
        if changed:
            raise Aborted(f"Transaction contention on {changed}")
        self._reads = {}
        super().commit()

    def rollback(self):
        self._writes = []
        self._reads = {}
        self._db.rollbacks += 1


class FakeFirestore:
    def __init__(self):
        self.store = {}
        self.versions = {}
        self.commits = 0
        self.rollbacks = 0

    def collection(self, name):
        return FakeCollectionReference(self, name)

    def transaction(self, **kwargs):
        return FakeTransaction(self)

    def batch(self):
        return FakeWriteBatch(self)

    def docs(self, name):
        """테스트 검증용: 컬렉션의 모든 문서를 딕셔너리 목록으로 반환"""
        return [copy.deepcopy(d) for d in self.store.get(name, {}).values()]


def fake_transactional(to_wrap):
    def wrapper(transaction, *args, **kwargs):
        for attempt in range(1, MAX_TRANSACTION_ATTEMPTS + 1):
            try:
                result = to_wrap(transaction, *args, **kwargs)
                transaction.commit()
                return result
            except Aborted:
                transaction.rollback()
                if attempt == MAX_TRANSACTION_ATTEMPTS:
                    raise
            except Exception:
                transaction.rollback()
                raise
    return wrapper


# =====================================================================================
# 픽스처
# =====================================================================================
@pytest.fixture
def fake_db(monkeypatch):
    db = FakeFirestore()
    monkeypatch.setattr(firestore, "client", lambda *args, **kwargs: db)
    monkeypatch.setattr(firestore, "transactional", fake_transactional)
    return db


@pytest.fixture
def frozen_now(monkeypatch):
    monkeypatch.setattr(DateTimeUtils, "now", staticmethod(lambda: FIXED_NOW))
    return FIXED_NOW


@pytest.fixture
def app(fake_db, monkeypatch):
    from petfoundus import create_app

    monkeypatch.setattr(firebase_admin, "_apps", {"[DEFAULT]": object()})
    flask_app = create_app("testing")
    return flask_app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_header(app):
    from petfoundus.core.security import issue_access_token

    def _make(identity, role):
        with app.app_context():
            token = issue_access_token(identity, role)
        return {"Authorization": f"Bearer {token}"}
    return _make


@pytest.fixture
def seed(fake_db):
    """테스트 데이터를 Firestore 더블에 직접 기록하는 헬퍼 모음"""
    from werkzeug.security import generate_password_hash

    class Seeder:
        def shelter(self, shelter_id="shelter-1", email="shelter@petfoundus.com", password="secret123", **extra):
            doc = {
                "shelter_id": shelter_id, "name": "Penang Paws", "email": email,
                "password_hash": generate_password_hash(password), "phone": "+6041234567",
                "location": {"address": "1 Jalan Test", "city": "George Town", "state": "Penang"},
                "pets": [],
            }
            doc.update(extra)
            fake_db.collection("shelters").document(shelter_id).set(doc)
            return doc

        def adopter(self, adopter_id="adopter-1", email="amy@example.com", password="secret123", **extra):
            doc = {
                "adopter_id": adopter_id, "email": email,
                "password_hash": generate_password_hash(password),
                "full_name": "Amy Tan", "phone": "+60123456789", "address": {},
                "preferences": {
                    "preferred_size": [], "preferred_age": [], "preferred_temperament": [],
                    "has_garden": False, "has_other_pets": False, "has_children": False,
                    "experience_level": "First-time",
                },
                "adopted_pets": [], "is_active": True,
                "created_at": FIXED_NOW, "updated_at": FIXED_NOW,
            }
            doc.update(extra)
            fake_db.collection("adopters").document(adopter_id).set(doc)
            return doc

        def pet(self, pet_id="pet-1", shelter_id="shelter-1", **extra):
            doc = {
                "pet_id": pet_id, "shelter_id": shelter_id, "name": "Milo",
                "species": "Dog", "gender": "Male", "size": "Medium", "breed": "Mixed",
                "age": {"years": 1, "months": 2},
                "images": [{"url": "https://img.example.com/milo.jpg", "caption": None}],
                "labels": {"temperament": ["Friendly"], "good_with": ["Children"]},
                "health_status": {}, "vaccination_history": [],
                "adoption_status": "Available", "adopted_by": None, "adoption_date": None,
                "description": "A friendly dog", "special_needs": None, "behavior_notes": None,
                "created_at": FIXED_NOW, "updated_at": FIXED_NOW,
            }
            doc.update(extra)
            fake_db.collection("pets").document(pet_id).set(doc)
            shelter_ref = fake_db.collection("shelters").document(shelter_id)
            shelter = shelter_ref.get().to_dict()
            if shelter is not None:
                shelter_ref.update({"pets": shelter["pets"] + [pet_id]})
            return doc

        def request(self, request_id, adopter_id, pet_id, shelter_id="shelter-1", status="Pending", request_date=FIXED_NOW):
            doc = {
                "request_id": request_id, "adopter_id": adopter_id, "pet_id": pet_id,
                "shelter_id": shelter_id, "status": status, "request_date": request_date,
                "shelter_response": None,
            }
            fake_db.collection("adoption_requests").document(request_id).set(doc)
            return doc

        def template(self, template_id, shelter_id="shelter-1", title="Initial Vaccination",
                     category="Vaccination", days_after_adoption=7, active=True):
            doc = {
                "template_id": template_id, "shelter_id": shelter_id, "title": title,
                "category": category, "days_after_adoption": days_after_adoption,
                "description": f"{title} reminder", "active": active,
            }
            fake_db.collection("reminder_templates").document(template_id).set(doc)
            return doc

        def reminder(self, reminder_id, pet_id, adopter_id, shelter_id="shelter-1",
                     due_date=FIXED_NOW, status="Pending", title="Initial Vaccination"):
            doc = {
                "reminder_id": reminder_id, "pet_id": pet_id, "adopter_id": adopter_id,
                "shelter_id": shelter_id, "template_id": None, "title": title,
                "description": None, "category": "Vaccination", "due_date": due_date,
                "status": status, "completed_at": None, "notes": None,
                "created_by": "System", "updated_by": "System", "created_at": FIXED_NOW,
            }
            fake_db.collection("care_reminders").document(reminder_id).set(doc)
            return doc

    return Seeder()
