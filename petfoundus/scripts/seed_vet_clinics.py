# petfoundus/scripts/seed_vet_clinics.py
"""
    python -m petfoundus.scripts.seed_vet_clinics
"""
from petfoundus import create_app


def main():
    app = create_app()
    with app.app_context():
        count = app.services['vet_clinics'].seed_defaults()
    print(f"Veterinary clinics seeded successfully ({count})")
    return count


if __name__ == '__main__':
    main()
