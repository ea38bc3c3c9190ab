# petfoundus/api/adopters/test_adopters.py
"""
입양자 가입/로그인/프로필 API 테스트

사용법: python -m pytest petfoundus/api/adopters -v
"""
import pytest

REGISTRATION = {
    "email": "  Amy@Example.com ",
    "password": "secret123",
    "full_name": "Amy Tan",
    "phone": "+60123456789",
}


def test_register_normalizes_email_and_hides_password(client, fake_db):
    resp = client.post("/api/adopters/register", json=REGISTRATION)

    assert resp.status_code == 201
    adopter = resp.get_json()["adopter"]
    assert adopter["email"] == "amy@example.com"
    assert "password_hash" not in adopter
    assert "password" not in adopter

    stored = fake_db.docs("adopters")[0]
    assert stored["password_hash"] != "secret123"
    assert stored["preferences"]["experience_level"] == "First-time"
    assert stored["adopted_pets"] == []


@pytest.mark.parametrize("field, value", [
    ("email", "not-an-email"),
    ("password", "123"),
    ("full_name", "A"),
    ("phone", "0123456789"),
])
def test_register_validation(client, fake_db, field, value):
    resp = client.post("/api/adopters/register", json=dict(REGISTRATION, **{field: value}))
    assert resp.status_code == 400
    assert field in resp.get_json()["details"]
    assert fake_db.docs("adopters") == []


def test_register_duplicate_email_is_conflict(client, seed):
    seed.adopter(email="amy@example.com")
    resp = client.post("/api/adopters/register", json=REGISTRATION)
    assert resp.status_code == 409
    assert resp.get_json()["error_code"] == "EMAIL_EXISTS"


def test_concurrent_registrations_with_same_email_create_one_account(client, app, fake_db, monkeypatch):
    service = app.services['adopters']
    query_class = type(service.adopters_ref.where('email', '==', 'amy@example.com'))
    original_stream = query_class.stream
    interleaved = []

    def stream_then_register(query, transaction=None, **kwargs):
        rows = list(original_stream(query, transaction=transaction, **kwargs))
        # 첫 가입 트랜잭션이 중복 검사를 마친 직후, 같은 이메일의 가입이 먼저 커밋됩니다.
        if transaction is not None and not interleaved:
            interleaved.append(True)
            service.register(dict(REGISTRATION, email="amy@example.com", full_name="Amy Twin"))
        return iter(rows)

    monkeypatch.setattr(query_class, "stream", stream_then_register)

    resp = client.post("/api/adopters/register", json=REGISTRATION)

    assert resp.status_code == 409
    assert [a["full_name"] for a in fake_db.docs("adopters")] == ["Amy Twin"]
    assert len(fake_db.docs("account_emails")) == 1


def test_login_returns_adopter_token(client, seed):
    seed.adopter("adopter-1", email="amy@example.com", password="secret123")

    resp = client.post("/api/adopters/login", json={"email": "AMY@example.com", "password": "secret123"})

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["adopter"]["adopter_id"] == "adopter-1"
    profile = client.get("/api/adopters/adopter-1",
                         headers={"Authorization": f"Bearer {body['access_token']}"})
    assert profile.status_code == 200


def test_login_wrong_password(client, seed):
    seed.adopter(email="amy@example.com", password="secret123")
    resp = client.post("/api/adopters/login", json={"email": "amy@example.com", "password": "wrong"})
    assert resp.status_code == 401


def test_login_unknown_email(client, fake_db):
    resp = client.post("/api/adopters/login", json={"email": "nobody@example.com", "password": "x"})
    assert resp.status_code == 401


def test_shelter_routes_reject_adopter_role(client, seed, auth_header):
    seed.shelter("shelter-1")
    resp = client.get("/api/shelters/shelter-1/stats", headers=auth_header("shelter-1", "adopter"))
    assert resp.status_code == 403


def test_profile_includes_adopted_pets_and_requests(client, seed, auth_header, frozen_now):
    seed.shelter("shelter-1")
    seed.pet("pet-1", adoption_status="Adopted", adopted_by="adopter-1")
    seed.pet("pet-2")
    seed.adopter("adopter-1", adopted_pets=[{"pet_id": "pet-1", "shelter_id": "shelter-1", "adoption_date": frozen_now}])
    seed.request("req-1", "adopter-1", "pet-2")

    resp = client.get("/api/adopters/adopter-1", headers=auth_header("adopter-1", "adopter"))

    body = resp.get_json()
    assert body["adopter"]["adopted_pets"][0]["pet"]["name"] == "Milo"
    assert [r["request_id"] for r in body["adoption_requests"]] == ["req-1"]


def test_profile_of_another_adopter_is_forbidden(client, seed, auth_header):
    seed.adopter("adopter-2", email="b@example.com")
    resp = client.get("/api/adopters/adopter-2", headers=auth_header("adopter-1", "adopter"))
    assert resp.status_code == 403


def test_update_preferences_merges_with_existing(client, seed, fake_db, auth_header):
    seed.adopter("adopter-1")

    resp = client.put("/api/adopters/adopter-1", headers=auth_header("adopter-1", "adopter"), json={
        "preferences": {"preferred_size": ["Small"], "has_garden": True},
        "address": {"city": "George Town"},
    })

    assert resp.status_code == 200
    prefs = fake_db.store["adopters"]["adopter-1"]["preferences"]
    assert prefs["preferred_size"] == ["Small"]
    assert prefs["has_garden"] is True
    assert prefs["experience_level"] == "First-time"
    assert fake_db.store["adopters"]["adopter-1"]["address"] == {"city": "George Town"}


def test_update_with_invalid_preference_value(client, seed, auth_header):
    seed.adopter("adopter-1")
    resp = client.put("/api/adopters/adopter-1", headers=auth_header("adopter-1", "adopter"),
                      json={"preferences": {"preferred_age": ["Ancient"]}})
    assert resp.status_code == 400


def test_update_with_empty_body(client, seed, auth_header):
    seed.adopter("adopter-1")
    resp = client.put("/api/adopters/adopter-1", headers=auth_header("adopter-1", "adopter"), json={})
    assert resp.status_code == 400
