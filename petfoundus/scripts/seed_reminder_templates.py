# petfoundus/scripts/seed_reminder_templates.py
"""
보호소의 리마인더 템플릿을 기본 템플릿 4개로 교체합니다.

    python -m petfoundus.scripts.seed_reminder_templates <shelter_id>
"""
import argparse

from petfoundus import create_app


def main(argv=None):
    parser = argparse.ArgumentParser(description="Replace a shelter's reminder templates with the defaults.")
    parser.add_argument('shelter_id')
    args = parser.parse_args(argv)

    app = create_app()
    with app.app_context():
        shelter = app.services['shelters'].get_shelter(args.shelter_id)
        templates = app.services['reminder_templates'].seed_defaults(args.shelter_id)
    print(f"Seeded {len(templates)} reminder templates for {shelter['name']}")
    for template in templates:
        print(f"  - {template['title']} (+{template['days_after_adoption']}d, {template['category']})")
    return templates


if __name__ == '__main__':
    main()
