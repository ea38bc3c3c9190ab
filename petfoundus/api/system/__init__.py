# petfoundus/api/system/__init__.py
