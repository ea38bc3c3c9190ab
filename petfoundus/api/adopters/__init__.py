# petfoundus/api/adopters/__init__.py
