# petfoundus/api/pet_updates/__init__.py
