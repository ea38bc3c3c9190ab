# petfoundus/scripts/__init__.py
"""
운영용 배치 스크립트 모음. `python -m petfoundus.scripts.<name>` 형태로 실행합니다.
"""
