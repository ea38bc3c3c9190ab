# petfoundus/scripts/backfill_care_reminders.py
"""
리마인더 템플릿 도입 이전에 입양된 반려동물에게 케어 리마인더를 생성합니다.
이미 리마인더가 있는 반려동물은 건너뛰므로 반복 실행해도 안전합니다.

    python -m petfoundus.scripts.backfill_care_reminders
"""
from petfoundus import create_app


def main():
    app = create_app()
    with app.app_context():
        summary = app.services['reminders'].backfill()
    print(f"Created reminders: {summary['created']}")
    print(f"Skipped (already had reminders): {summary['skipped_existing']}")
    print(f"Skipped (no active templates): {summary['skipped_no_templates']}")
    return summary


if __name__ == '__main__':
    main()
