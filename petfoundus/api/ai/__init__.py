# petfoundus/api/ai/__init__.py
