# petfoundus/api/shelters/test_shelters.py
import pytest

def test_shelter_login(client, seed):
    seed.shelter("shelter-1", email="shelter@petfoundus.com", password="secret123")

    resp = client.post("/api/shelters/login", json={"email": "shelter@petfoundus.com", "password": "secret123"})

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["shelter"]["shelter_id"] == "shelter-1"
    assert "password_hash" not in body["shelter"]
    assert body["access_token"]


def test_shelter_login_wrong_password(client, seed):
    seed.shelter("shelter-1")
    resp = client.post("/api/shelters/login", json={"email": "shelter@petfoundus.com", "password": "nope"})
    assert resp.status_code == 401


def test_public_shelter_profile(client, seed):
    seed.shelter("shelter-1")
    resp = client.get("/api/shelters/shelter-1")
    assert resp.status_code == 200
    shelter = resp.get_json()["shelter"]
    assert shelter["name"] == "Penang Paws"
    assert "password_hash" not in shelter


def test_missing_shelter_profile(client, fake_db):
    resp = client.get("/api/shelters/unknown")
    assert resp.status_code == 404


def test_update_shelter_location_merges(client, seed, fake_db, auth_header):
    seed.shelter("shelter-1")

    resp = client.put("/api/shelters/shelter-1", headers=auth_header("shelter-1", "shelter"),
                      json={"location": {"city": "Butterworth"}})

    assert resp.status_code == 200
    location = fake_db.store["shelters"]["shelter-1"]["location"]
    assert location["city"] == "Butterworth"
    assert location["address"] == "1 Jalan Test"


def test_shelter_stats(client, seed, auth_header):
    seed.shelter("shelter-1")
    seed.pet("pet-1")
    seed.pet("pet-2")
    seed.pet("pet-3", adoption_status="Adopted", adopted_by="adopter-1")
    seed.request("req-1", "adopter-1", "pet-1")
    seed.request("req-2", "adopter-2", "pet-1")
    seed.request("req-3", "adopter-2", "pet-2", status="Rejected")

    resp = client.get("/api/shelters/shelter-1/stats", headers=auth_header("shelter-1", "shelter"))

    assert resp.get_json()["stats"] == {
        "total_pets": 3, "available_pets": 2, "adopted_pets": 1, "pending_requests": 2,
    }


def test_create_shelter_rejects_duplicate_email(app, seed):
    seed.shelter("shelter-1", email="shelter@petfoundus.com")
    shelter_service = app.services['shelters']

    created = shelter_service.create_shelter("Second Home", "new@petfoundus.com", "secret123")
    assert created["email"] == "new@petfoundus.com"

    with pytest.raises(ValueError, match="already registered"):
        shelter_service.create_shelter("Dup", "Shelter@PetFoundUs.com", "secret123")


def test_create_shelter_claims_email_for_later_accounts(app, fake_db):
    shelter_service = app.services['shelters']
    shelter_service.create_shelter("Penang Paws", "paws@petfoundus.com", "secret123")

    # 보호소 문서를 지워도 이메일 점유 문서가 중복 생성을 막습니다.
    fake_db.store["shelters"].clear()
    with pytest.raises(ValueError, match="already registered"):
        shelter_service.create_shelter("Again", " PAWS@petfoundus.com", "secret123")

    claims = fake_db.docs("account_emails")
    assert len(claims) == 1
    assert claims[0]["email"] == "paws@petfoundus.com"
