# petfoundus/core/__init__.py
