# petfoundus/api/adoption_requests/test_adoption_requests.py
"""
입양 요청 라이프사이클 테스트 (생성/취소/승인/거절)

사용법: python -m pytest petfoundus/api/adoption_requests -v
"""
import copy
from datetime import timedelta

import pytest


@pytest.fixture
def world(seed):
    """보호소 1곳, 반려동물 1마리, 입양자 2명, 활성 템플릿 1개"""
    seed.shelter("shelter-1")
    seed.shelter("shelter-2", email="other@petfoundus.com")
    seed.pet("pet-1", shelter_id="shelter-1")
    seed.adopter("adopter-1", email="a1@example.com")
    seed.adopter("adopter-2", email="a2@example.com")
    seed.template("tpl-1", shelter_id="shelter-1", title="Initial Vaccination", days_after_adoption=7)
    return seed


def _approve(client, auth_header, request_id, shelter_id="shelter-1", **body):
    return client.post(f"/api/shelters/{shelter_id}/requests/{request_id}/approve",
                       headers=auth_header(shelter_id, "shelter"), json=body)


# ================== 생성 ==================

def test_create_request_copies_shelter_from_pet(client, world, fake_db, auth_header, frozen_now):
    resp = client.post("/api/adopters/adopter-1/request", json={"pet_id": "pet-1"},
                       headers=auth_header("adopter-1", "adopter"))

    assert resp.status_code == 201
    body = resp.get_json()
    assert body["success"] is True
    stored = fake_db.docs("adoption_requests")
    assert len(stored) == 1
    assert stored[0]["status"] == "Pending"
    assert stored[0]["shelter_id"] == "shelter-1"
    assert stored[0]["request_date"] == frozen_now


def test_create_request_rejects_duplicate_unresolved_request(client, world, auth_header):
    world.request("req-1", "adopter-1", "pet-1")
    resp = client.post("/api/adopters/adopter-1/request", json={"pet_id": "pet-1"},
                       headers=auth_header("adopter-1", "adopter"))
    assert resp.status_code == 409
    assert resp.get_json()["success"] is False


def test_create_request_allowed_again_after_rejection(client, world, fake_db, auth_header):
    world.request("req-old", "adopter-1", "pet-1", status="Rejected")
    resp = client.post("/api/adopters/adopter-1/request", json={"pet_id": "pet-1"},
                       headers=auth_header("adopter-1", "adopter"))
    assert resp.status_code == 201
    assert len(fake_db.docs("adoption_requests")) == 2


def test_create_request_for_unavailable_pet_is_conflict(client, world, fake_db, auth_header):
    fake_db.store["pets"]["pet-1"]["adoption_status"] = "Adopted"
    resp = client.post("/api/adopters/adopter-1/request", json={"pet_id": "pet-1"},
                       headers=auth_header("adopter-1", "adopter"))
    assert resp.status_code == 409
    assert fake_db.docs("adoption_requests") == []


def test_create_request_for_missing_pet_is_not_found(client, world, auth_header):
    resp = client.post("/api/adopters/adopter-1/request", json={"pet_id": "ghost"},
                       headers=auth_header("adopter-1", "adopter"))
    assert resp.status_code == 404


def test_create_request_requires_pet_id(client, world, auth_header):
    resp = client.post("/api/adopters/adopter-1/request", json={},
                       headers=auth_header("adopter-1", "adopter"))
    assert resp.status_code == 400
    assert resp.get_json()["error_code"] == "VALIDATION_ERROR"


def test_adopter_cannot_act_for_another_adopter(client, world, auth_header):
    resp = client.post("/api/adopters/adopter-2/request", json={"pet_id": "pet-1"},
                       headers=auth_header("adopter-1", "adopter"))
    assert resp.status_code == 403


def test_request_without_token_is_unauthorized(client, world):
    resp = client.post("/api/adopters/adopter-1/request", json={"pet_id": "pet-1"})
    assert resp.status_code == 401


# ================== 취소 ==================

def test_cancel_removes_pending_request(client, world, fake_db, auth_header):
    world.request("req-1", "adopter-1", "pet-1")
    resp = client.delete("/api/adopters/adopter-1/request/pet-1", headers=auth_header("adopter-1", "adopter"))
    assert resp.status_code == 200
    assert fake_db.docs("adoption_requests") == []


@pytest.mark.parametrize("status", ["Approved", "Rejected"])
def test_cancel_resolved_request_fails_without_mutation(client, world, fake_db, auth_header, status):
    world.request("req-1", "adopter-1", "pet-1", status=status)
    before = copy.deepcopy(fake_db.store)

    resp = client.delete("/api/adopters/adopter-1/request/pet-1", headers=auth_header("adopter-1", "adopter"))

    assert resp.status_code == 409
    assert resp.get_json()["success"] is False
    assert fake_db.store == before


def test_cancel_missing_request_is_not_found(client, world, auth_header):
    resp = client.delete("/api/adopters/adopter-1/request/pet-1", headers=auth_header("adopter-1", "adopter"))
    assert resp.status_code == 404


def test_cancel_retries_and_fails_when_approval_lands_first(client, app, world, fake_db, auth_header, monkeypatch):
    world.request("req-1", "adopter-1", "pet-1")
    service = app.services['adoption_requests']
    query_class = type(service.requests_ref.where('pet_id', '==', 'pet-1'))
    original_stream = query_class.stream
    interleaved, approvals = [], []

    def stream_then_approve(query, transaction=None, **kwargs):
        rows = list(original_stream(query, transaction=transaction, **kwargs))
        # 취소 트랜잭션이 Pending 요청을 읽은 직후, 보호소 승인이 먼저 커밋됩니다.
        if transaction is not None and not interleaved:
            interleaved.append(True)
            approvals.append(service.approve_request("shelter-1", "req-1"))
        return iter(rows)

    monkeypatch.setattr(query_class, "stream", stream_then_approve)

    resp = client.delete("/api/adopters/adopter-1/request/pet-1", headers=auth_header("adopter-1", "adopter"))

    assert approvals[0]["status"] == "SUCCESS"
    assert resp.status_code == 409
    assert fake_db.store["adoption_requests"]["req-1"]["status"] == "Approved"
    assert fake_db.store["pets"]["pet-1"]["adoption_status"] == "Adopted"
    assert fake_db.rollbacks == 2


# ================== 승인 ==================

def test_approve_scenario_single_template(client, world, fake_db, auth_header, frozen_now):
    world.request("req-1", "adopter-1", "pet-1")

    resp = _approve(client, auth_header, "req-1", message="Congratulations!")

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["success"] is True
    assert body["status"] == "SUCCESS"

    pet = fake_db.store["pets"]["pet-1"]
    assert pet["adoption_status"] == "Adopted"
    assert pet["adopted_by"] == "adopter-1"
    assert pet["adoption_date"] == frozen_now

    request_doc = fake_db.store["adoption_requests"]["req-1"]
    assert request_doc["status"] == "Approved"
    assert request_doc["shelter_response"]["message"] == "Congratulations!"

    reminders = fake_db.docs("care_reminders")
    assert len(reminders) == 1
    assert reminders[0]["due_date"] == frozen_now + timedelta(days=7)
    assert reminders[0]["status"] == "Pending"
    assert reminders[0]["category"] == "Vaccination"
    assert reminders[0]["created_by"] == "System"
    assert reminders[0]["adopter_id"] == "adopter-1"

    adopter = fake_db.store["adopters"]["adopter-1"]
    assert adopter["adopted_pets"] == [{"pet_id": "pet-1", "shelter_id": "shelter-1", "adoption_date": frozen_now}]


def test_approve_rejects_competing_requests_without_their_reminders(client, world, fake_db, auth_header):
    world.request("req-1", "adopter-1", "pet-1")
    world.request("req-2", "adopter-2", "pet-1")

    resp = _approve(client, auth_header, "req-1")

    assert resp.status_code == 200
    assert resp.get_json()["rejected_requests"] == 1
    assert fake_db.store["adoption_requests"]["req-2"]["status"] == "Rejected"
    reminders = fake_db.docs("care_reminders")
    assert {r["adopter_id"] for r in reminders} == {"adopter-1"}


def test_approve_creates_one_reminder_per_active_template(client, world, fake_db, auth_header):
    world.template("tpl-2", title="General Health Check", category="Health Check", days_after_adoption=14)
    world.template("tpl-3", title="Inactive", days_after_adoption=3, active=False)
    world.template("tpl-other", shelter_id="shelter-2", title="Other shelter", days_after_adoption=1)
    world.request("req-1", "adopter-1", "pet-1")

    _approve(client, auth_header, "req-1")

    reminders = fake_db.docs("care_reminders")
    assert sorted(r["template_id"] for r in reminders) == ["tpl-1", "tpl-2"]
    health = next(r for r in reminders if r["template_id"] == "tpl-2")
    assert health["category"] == "Health Check"


def test_reapproval_replaces_reminders_for_the_pair(client, world, fake_db, auth_header):
    world.request("req-1", "adopter-1", "pet-1")
    _approve(client, auth_header, "req-1")
    first_ids = {r["reminder_id"] for r in fake_db.docs("care_reminders")}

    # 동일 (pet, adopter) 쌍에 대한 재승인 상황을 재현
    fake_db.store["pets"]["pet-1"]["adoption_status"] = "Available"
    fake_db.store["adoption_requests"]["req-1"]["status"] = "Pending"
    _approve(client, auth_header, "req-1")

    reminders = fake_db.docs("care_reminders")
    assert len(reminders) == 1
    assert {r["reminder_id"] for r in reminders}.isdisjoint(first_ids)
    assert len(fake_db.store["adopters"]["adopter-1"]["adopted_pets"]) == 1


@pytest.mark.parametrize("status", ["Approved", "Rejected"])
def test_approve_non_pending_leaves_data_unchanged(client, world, fake_db, auth_header, status):
    world.request("req-1", "adopter-1", "pet-1", status=status)
    before = copy.deepcopy(fake_db.store)

    resp = _approve(client, auth_header, "req-1")

    assert resp.status_code == 409
    body = resp.get_json()
    assert body["success"] is False
    assert body["message"] == "Request is not pending"
    assert fake_db.store == before


def test_approve_by_other_shelter_is_forbidden(client, world, fake_db, auth_header):
    world.request("req-1", "adopter-1", "pet-1")
    before = copy.deepcopy(fake_db.store)

    resp = _approve(client, auth_header, "req-1", shelter_id="shelter-2")

    assert resp.status_code == 403
    assert fake_db.store == before


def test_approve_missing_request_is_not_found(client, world, auth_header):
    resp = _approve(client, auth_header, "nope")
    assert resp.status_code == 404


def test_approve_rolls_back_everything_when_reminder_write_fails(client, app, world, fake_db, auth_header, monkeypatch):
    world.request("req-1", "adopter-1", "pet-1")
    world.request("req-2", "adopter-2", "pet-1")
    before = copy.deepcopy(fake_db.store)

    def boom(*args, **kwargs):
        raise RuntimeError("reminder insert failed")
    monkeypatch.setattr(app.services['reminders'], 'replace_reminders_transactional', boom)

    resp = _approve(client, auth_header, "req-1")

    assert resp.status_code == 500
    assert "reminder insert failed" not in resp.get_data(as_text=True)
    assert fake_db.store == before
    assert fake_db.rollbacks == 1


# ================== 거절 ==================

def test_reject_changes_only_that_request(client, world, fake_db, auth_header):
    world.request("req-1", "adopter-1", "pet-1")
    world.request("req-2", "adopter-2", "pet-1")
    pet_before = copy.deepcopy(fake_db.store["pets"]["pet-1"])

    resp = client.patch("/api/shelters/shelter-1/requests/req-1/reject",
                        headers=auth_header("shelter-1", "shelter"), json={"message": "Sorry"})

    assert resp.status_code == 200
    assert fake_db.store["adoption_requests"]["req-1"]["status"] == "Rejected"
    assert fake_db.store["adoption_requests"]["req-1"]["shelter_response"]["message"] == "Sorry"
    assert fake_db.store["adoption_requests"]["req-2"]["status"] == "Pending"
    assert fake_db.store["pets"]["pet-1"] == pet_before
    assert fake_db.docs("care_reminders") == []


def test_reject_non_pending_is_conflict(client, world, fake_db, auth_header):
    world.request("req-1", "adopter-1", "pet-1", status="Approved")
    resp = client.patch("/api/shelters/shelter-1/requests/req-1/reject",
                        headers=auth_header("shelter-1", "shelter"))
    assert resp.status_code == 409
    assert fake_db.store["adoption_requests"]["req-1"]["status"] == "Approved"


# ================== 목록 ==================

def test_shelter_request_list_is_denormalized(client, world, auth_header, frozen_now):
    world.request("req-1", "adopter-1", "pet-1", request_date=frozen_now - timedelta(days=1))
    world.request("req-2", "adopter-2", "pet-1", request_date=frozen_now)

    resp = client.get("/api/shelters/shelter-1/requests", headers=auth_header("shelter-1", "shelter"))

    assert resp.status_code == 200
    rows = resp.get_json()["requests"]
    assert [r["request_id"] for r in rows] == ["req-2", "req-1"]
    assert rows[0]["adopter_email"] == "a2@example.com"
    assert rows[0]["pet_name"] == "Milo"
    assert rows[0]["pet_image"] == "https://img.example.com/milo.jpg"


def test_adopter_request_list_includes_pet_summary(client, world, auth_header):
    world.request("req-1", "adopter-1", "pet-1")
    resp = client.get("/api/adopters/adopter-1/requests", headers=auth_header("adopter-1", "adopter"))
    assert resp.status_code == 200
    requests = resp.get_json()["requests"]
    assert requests[0]["pet"]["name"] == "Milo"


def test_clean_ghost_requests_removes_requests_for_deleted_pets(app, world, fake_db):
    world.request("req-1", "adopter-1", "pet-1")
    world.request("req-ghost", "adopter-1", "deleted-pet")

    removed = app.services['adoption_requests'].clean_ghost_requests()

    assert removed == 1
    assert list(fake_db.store["adoption_requests"]) == ["req-1"]
