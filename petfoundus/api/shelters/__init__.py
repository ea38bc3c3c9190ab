# petfoundus/api/shelters/__init__.py
