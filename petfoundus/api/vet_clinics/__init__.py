# petfoundus/api/vet_clinics/__init__.py
