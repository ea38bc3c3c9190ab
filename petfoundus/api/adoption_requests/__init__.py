# petfoundus/api/adoption_requests/__init__.py
