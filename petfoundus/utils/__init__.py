# petfoundus/utils/__init__.py
"""
유틸리티 모듈 패키지

프로젝트 전체에서 공통으로 사용되는 시간/날짜, 인라인 이미지, 거리 계산 함수들을 포함합니다.
"""

from .datetime_utils import DateTimeUtils
from .image_utils import to_data_url, read_uploads
from .geo_utils import haversine_distance_m

__all__ = [
    'DateTimeUtils',
    'to_data_url', 'read_uploads',
    'haversine_distance_m',
]
