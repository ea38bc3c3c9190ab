# petfoundus/api/reports/__init__.py
