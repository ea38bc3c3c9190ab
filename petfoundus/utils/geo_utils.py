# petfoundus/utils/geo_utils.py
"""위경도 좌표 간 대원 거리(haversine) 계산 유틸리티."""

import math

EARTH_RADIUS_M = 6371008.8


def haversine_distance_m(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """두 좌표 사이의 구면 거리를 미터 단위로 반환합니다."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lng2 - lng1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    return 2 * EARTH_RADIUS_M * math.asin(math.sqrt(a))
