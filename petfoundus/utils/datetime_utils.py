# petfoundus/utils/datetime_utils.py
"""
프로젝트 전체에서 일관된 시간/날짜 처리를 위한 중앙화된 유틸리티 모듈

- 모든 시각은 UTC timezone-aware datetime으로 통일합니다.
- Firestore 저장 전/후 변환 규칙을 한 곳에서 관리합니다.
- 입양 후 케어 리마인더의 마감일 계산(기준 시각 + N일)을 담당합니다.
"""

import logging
from datetime import datetime, date, timezone, time, timedelta
from typing import Any, Optional
from dateutil import parser as dateutil_parser

logger = logging.getLogger(__name__)


class DateTimeUtils:
    """시간/날짜 처리를 위한 중앙화된 유틸리티 클래스"""

    @staticmethod
    def now() -> datetime:
        """현재 시간을 UTC timezone-aware datetime으로 반환"""
        return datetime.now(timezone.utc)

    @staticmethod
    def parse_iso_datetime(iso_string: str) -> datetime:
        """
        ISO 포맷 문자열을 UTC datetime 객체로 파싱

        지원 포맷:
        - 2024-01-15T10:30:00Z
        - 2024-01-15T10:30:00+08:00
        - 2024-01-15T10:30:00 (UTC로 간주)
        """
        try:
            if not iso_string:
                raise ValueError("빈 문자열은 파싱할 수 없습니다")

            if iso_string.endswith('Z'):
                iso_string = iso_string[:-1] + '+00:00'

            dt = dateutil_parser.isoparse(iso_string)
            if dt.tzinfo is None:
                dt = dt.replace(tzinfo=timezone.utc)
            return dt.astimezone(timezone.utc)

        except Exception as e:
            logger.error(f"ISO datetime 파싱 실패: {iso_string} - {e}")
            raise ValueError(f"잘못된 ISO 날짜 형식입니다: {iso_string}")

    @staticmethod
    def to_iso_string(dt: datetime) -> str:
        """datetime 객체를 'Z' 접미사를 가진 ISO 문자열로 변환"""
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        else:
            dt = dt.astimezone(timezone.utc)
        return dt.isoformat().replace('+00:00', 'Z')

    @staticmethod
    def add_days(base: datetime, days: int) -> datetime:
        """
        기준 시각에 일(day) 단위 오프셋을 더합니다.
        리마인더 마감일 = 입양(승인) 시각 + 템플릿의 days_after_adoption.
        """
        if base.tzinfo is None:
            base = base.replace(tzinfo=timezone.utc)
        return base + timedelta(days=days)

    @staticmethod
    def for_firestore(obj: Any) -> Any:
        """
        Firestore 저장을 위해 객체의 날짜/시간 필드를 변환

        변환 규칙:
        - date -> datetime (00:00:00 UTC)
        - timezone-naive datetime -> timezone-aware datetime (UTC)
        - dict/list 내부 재귀적 변환
        """
        if isinstance(obj, date) and not isinstance(obj, datetime):
            return datetime.combine(obj, time.min).replace(tzinfo=timezone.utc)
        elif isinstance(obj, datetime):
            if obj.tzinfo is None:
                return obj.replace(tzinfo=timezone.utc)
            return obj.astimezone(timezone.utc)
        elif isinstance(obj, dict):
            return {k: DateTimeUtils.for_firestore(v) for k, v in obj.items()}
        elif isinstance(obj, list):
            return [DateTimeUtils.for_firestore(item) for item in obj]
        return obj

    @staticmethod
    def from_firestore(obj: Any) -> Any:
        """
        Firestore에서 읽은 데이터의 datetime 필드를 UTC datetime으로 정규화
        (DatetimeWithNanoseconds 역시 datetime의 하위 클래스입니다.)
        """
        try:
            if isinstance(obj, datetime):
                if obj.tzinfo is None:
                    return obj.replace(tzinfo=timezone.utc)
                return obj.astimezone(timezone.utc)
            elif isinstance(obj, dict):
                return {k: DateTimeUtils.from_firestore(v) for k, v in obj.items()}
            elif isinstance(obj, list):
                return [DateTimeUtils.from_firestore(item) for item in obj]
            return obj
        except Exception as e:
            logger.error(f"Firestore 읽기 변환 실패: {obj} ({type(obj)}) - {e}")
            # 변환 실패 시 원본 객체 반환 (로그만 남김)
            return obj

    @staticmethod
    def validate_datetime_field(value: Any, field_name: str = "datetime") -> datetime:
        """
        API 요청이나 저장된 문서에서 받은 datetime 값을 검증하고 UTC로 변환

        Raises:
            ValueError: None이거나 파싱할 수 없는 경우
        """
        if value is None:
            raise ValueError(f"{field_name}은 필수 필드입니다")
        if isinstance(value, str):
            return DateTimeUtils.parse_iso_datetime(value)
        if isinstance(value, datetime):
            if value.tzinfo is None:
                return value.replace(tzinfo=timezone.utc)
            return value.astimezone(timezone.utc)
        if isinstance(value, date):
            return DateTimeUtils.for_firestore(value)
        raise ValueError(f"잘못된 {field_name} 형식입니다: {value}")

    @staticmethod
    def coerce_optional(value: Any) -> Optional[datetime]:
        """값이 있으면 UTC datetime으로, 없거나 해석 불가하면 None을 반환"""
        if value is None:
            return None
        try:
            return DateTimeUtils.validate_datetime_field(value)
        except ValueError:
            logger.warning(f"datetime으로 해석할 수 없는 값을 무시합니다: {value!r}")
            return None

