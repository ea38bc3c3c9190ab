# petfoundus/services/__init__.py
