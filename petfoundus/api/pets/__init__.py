# petfoundus/api/pets/__init__.py
