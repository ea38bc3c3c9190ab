# petfoundus/models/__init__.py
"""
Firestore 컬렉션 문서 구조를 정의하는 데이터클래스 모음
"""
