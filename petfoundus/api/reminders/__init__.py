# petfoundus/api/reminders/__init__.py
