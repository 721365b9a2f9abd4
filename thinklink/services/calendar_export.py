# 모임 → iCalendar(.ics) 내보내기 ("캘린더에 추가")

from datetime import datetime, timedelta

from thinklink.models.meetup import Meetup
from thinklink.services.civil_time import civil_to_utc

EVENT_DURATION = timedelta(hours=2)
PRODID = "-//ThinkLink//ThinkLink Calendar//EN"
UID_DOMAIN = "thinklink.app"


def _ics_datetime(value: datetime) -> str:
    return civil_to_utc(value).strftime("%Y%m%dT%H%M%SZ")


def _escape(text: str) -> str:
    """RFC 5545 TEXT 이스케이프."""
    return (
        text.replace("\\", "\\\\")
        .replace(";", "\\;")
        .replace(",", "\\,")
        .replace("\r\n", "\\n")
        .replace("\n", "\\n")
    )


def meetup_to_ics(meetup: Meetup) -> str:
    """단일 VEVENT 캘린더. 시작 시각은 현지 벽시계 → UTC 변환, 길이 2시간 고정."""
    location = meetup.place_name or meetup.location
    description = f"{meetup.description}\n\nמיקום: {location}\n\nהצטרפו אלינו ב-ThinkLink!"
    lines = [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        f"PRODID:{PRODID}",
        "CALSCALE:GREGORIAN",
        "METHOD:PUBLISH",
        "BEGIN:VEVENT",
        f"UID:thinklink-{meetup.id}@{UID_DOMAIN}",
        f"DTSTART:{_ics_datetime(meetup.start_at)}",
        f"DTEND:{_ics_datetime(meetup.start_at + EVENT_DURATION)}",
        f"SUMMARY:{_escape(meetup.title)}",
        f"DESCRIPTION:{_escape(description)}",
        f"LOCATION:{_escape(location)}",
        "STATUS:CONFIRMED",
        "TRANSP:OPAQUE",
        "END:VEVENT",
        "END:VCALENDAR",
    ]
    return "\r\n".join(lines) + "\r\n"
