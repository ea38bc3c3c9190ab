# petfoundus/utils/test_datetime_utils.py
"""
시간 관리 유틸리티 기능 테스트

사용법: python -m pytest petfoundus/utils/test_datetime_utils.py -v
"""

import pytest
from datetime import datetime, date, timezone, timedelta
from petfoundus.utils.datetime_utils import DateTimeUtils


def test_parse_iso_datetime():
    """ISO 포맷 파싱 테스트"""
    test_cases = [
        "2024-01-15T10:30:00Z",
        "2024-01-15T10:30:00+08:00",
        "2024-01-15T10:30:00.123456Z",
        "2024-01-15T10:30:00"
    ]

    for iso_string in test_cases:
        dt = DateTimeUtils.parse_iso_datetime(iso_string)
        assert isinstance(dt, datetime)
        assert dt.tzinfo == timezone.utc

    shifted = DateTimeUtils.parse_iso_datetime("2024-01-15T10:30:00+08:00")
    assert shifted.hour == 2


def test_to_iso_string_uses_z_suffix():
    dt = datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)
    assert DateTimeUtils.to_iso_string(dt) == "2024-01-15T10:30:00Z"
    assert DateTimeUtils.to_iso_string(datetime(2024, 1, 15)) == "2024-01-15T00:00:00Z"


def test_add_days():
    """리마인더 마감일 계산 테스트"""
    base = datetime(2024, 1, 28, 9, 0, tzinfo=timezone.utc)
    assert DateTimeUtils.add_days(base, 7) == datetime(2024, 2, 4, 9, 0, tzinfo=timezone.utc)
    assert DateTimeUtils.add_days(base, 0) == base

    naive = DateTimeUtils.add_days(datetime(2024, 1, 1), 1)
    assert naive.tzinfo == timezone.utc
    assert naive - datetime(2024, 1, 1, tzinfo=timezone.utc) == timedelta(days=1)


def test_for_firestore():
    """Firestore 변환 테스트"""
    test_data = {
        'adoption_date': date(2020, 1, 15),
        'timestamp': datetime(2024, 1, 15, 10, 30),
        'nested': {
            'event_date': date(2023, 12, 25)
        },
        'list_data': [
            {'created_at': datetime(2024, 1, 1)}
        ],
        'untouched': 'text'
    }

    converted = DateTimeUtils.for_firestore(test_data)

    assert isinstance(converted['adoption_date'], datetime)
    assert isinstance(converted['nested']['event_date'], datetime)
    assert isinstance(converted['list_data'][0]['created_at'], datetime)
    assert converted['adoption_date'].tzinfo == timezone.utc
    assert converted['untouched'] == 'text'


def test_validate_datetime_field():
    """datetime 필드 검증 테스트"""
    valid_cases = [
        "2024-01-15T10:30:00Z",
        datetime(2024, 1, 15, 10, 30),
        datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc),
        date(2024, 1, 15),
    ]

    for case in valid_cases:
        result = DateTimeUtils.validate_datetime_field(case)
        assert isinstance(result, datetime)
        assert result.tzinfo == timezone.utc


def test_coerce_optional():
    assert DateTimeUtils.coerce_optional(None) is None
    assert DateTimeUtils.coerce_optional("not-a-date") is None
    assert DateTimeUtils.coerce_optional("2024-01-15T10:30:00Z").day == 15


def test_error_handling():
    """오류 처리 테스트"""
    with pytest.raises(ValueError):
        DateTimeUtils.parse_iso_datetime("invalid-date")

    with pytest.raises(ValueError):
        DateTimeUtils.parse_iso_datetime("")

    with pytest.raises(ValueError):
        DateTimeUtils.validate_datetime_field(None)
