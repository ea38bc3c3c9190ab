# petfoundus/api/__init__.py
