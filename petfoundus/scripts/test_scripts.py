# petfoundus/scripts/test_scripts.py
"""
운영 스크립트 테스트. create_app을 테스트 앱으로 바꿔 끼우고 출력과 저장 결과를 확인합니다.

사용법: python -m pytest petfoundus/scripts -v
"""
from datetime import timedelta

import pytest

from petfoundus.scripts import (
    backfill_care_reminders, clean_ghost_requests, create_shelter, seed_reminder_templates, seed_vet_clinics,
)


@pytest.fixture
def use_test_app(app, monkeypatch):
    def _patch(module):
        monkeypatch.setattr(module, "create_app", lambda *args, **kwargs: app)
    return _patch


def test_create_shelter_from_command_line(use_test_app, fake_db, capsys):
    use_test_app(create_shelter)

    shelter = create_shelter.main(["Island Rescue", "Rescue@Island.org", "secret123",
                                   "--phone", "+6049998888", "--city", "George Town"])

    assert capsys.readouterr().out == f"Created shelter Island Rescue with id {shelter['shelter_id']}\n"
    stored = fake_db.store["shelters"][shelter["shelter_id"]]
    assert stored["email"] == "rescue@island.org"
    assert stored["phone"] == "+6049998888"
    assert stored["location"] == {"address": None, "city": "George Town", "state": None}
    assert stored["password_hash"] != "secret123"


def test_create_shelter_requires_credentials(use_test_app, fake_db):
    use_test_app(create_shelter)
    with pytest.raises(SystemExit) as exc:
        create_shelter.main(["Island Rescue"])
    assert exc.value.code == 2
    assert fake_db.docs("shelters") == []


def test_seed_reminder_templates_prints_each_template(use_test_app, seed, capsys):
    use_test_app(seed_reminder_templates)
    seed.shelter("shelter-1")

    templates = seed_reminder_templates.main(["shelter-1"])

    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "Seeded 4 reminder templates for Penang Paws"
    assert len(lines) == 1 + len(templates) == 5
    assert "  - Initial Vaccination (+7d, Vaccination)" in lines


def test_seed_reminder_templates_for_unknown_shelter(use_test_app, fake_db):
    use_test_app(seed_reminder_templates)
    with pytest.raises(FileNotFoundError):
        seed_reminder_templates.main(["ghost"])
    assert fake_db.docs("reminder_templates") == []


def test_backfill_prints_summary(use_test_app, seed, fake_db, frozen_now, capsys):
    use_test_app(backfill_care_reminders)
    seed.shelter("shelter-1")
    seed.template("tpl-1", days_after_adoption=7)
    seed.pet("pet-1", adoption_status="Adopted", adopted_by="adopter-1")
    seed.adopter("adopter-1", adopted_pets=[
        {"pet_id": "pet-1", "shelter_id": "shelter-1", "adoption_date": frozen_now - timedelta(days=2)},
    ])

    summary = backfill_care_reminders.main()

    assert summary == {"created": 1, "skipped_existing": 0, "skipped_no_templates": 0}
    assert capsys.readouterr().out.splitlines() == [
        "Created reminders: 1",
        "Skipped (already had reminders): 0",
        "Skipped (no active templates): 0",
    ]
    assert fake_db.docs("care_reminders")[0]["due_date"] == frozen_now + timedelta(days=5)


def test_clean_ghost_requests_prints_removed_count(use_test_app, seed, fake_db, capsys):
    use_test_app(clean_ghost_requests)
    seed.shelter("shelter-1")
    seed.pet("pet-1")
    seed.request("req-live", "adopter-1", "pet-1")
    seed.request("req-ghost", "adopter-1", "pet-deleted")

    assert clean_ghost_requests.main() == 1
    assert capsys.readouterr().out == "Removed 1 ghost adoption requests\n"
    assert set(fake_db.store["adoption_requests"]) == {"req-live"}


def test_seed_vet_clinics_prints_count(use_test_app, fake_db, capsys):
    use_test_app(seed_vet_clinics)

    assert seed_vet_clinics.main() == 3
    assert capsys.readouterr().out == "Veterinary clinics seeded successfully (3)\n"
    assert len(fake_db.docs("vet_clinics")) == 3
