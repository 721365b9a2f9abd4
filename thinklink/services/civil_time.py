# 현지(시민) 타임존 기준 시각 계산
# meetups.start_at은 타임존 없이 저장된 현지 벽시계 시각 → "지금"도 같은 타임존의 벽시계 시각으로 비교해야
# UTC 오프셋 구간/서머타임 경계에서 모임이 잘못 포함·제외되지 않음

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

from thinklink.config import CIVIL_TIMEZONE


def civil_zone() -> ZoneInfo:
    return ZoneInfo(CIVIL_TIMEZONE)


def civil_now() -> datetime:
    """현재 시각을 시민 타임존 벽시계 시각(naive)으로 반환. start_at과 직접 비교 가능."""
    return datetime.now(civil_zone()).replace(tzinfo=None)


def civil_today() -> date:
    return civil_now().date()


def to_civil_naive(value: datetime) -> datetime:
    """
    aware datetime → 시민 타임존으로 변환 후 tzinfo 제거.
    naive datetime은 이미 현지 벽시계 시각으로 보고 그대로 반환.
    """
    if value.tzinfo is None:
        return value
    return value.astimezone(civil_zone()).replace(tzinfo=None)


def civil_to_utc(value: datetime) -> datetime:
    """naive 현지 시각 → aware UTC (캘린더 내보내기 등)."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=civil_zone())
    return value.astimezone(timezone.utc)
