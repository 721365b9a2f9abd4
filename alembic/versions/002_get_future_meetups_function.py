"""get_future_meetups SQL function (PostgreSQL only)

DB에 직접 붙는 클라이언트용. API의 meetup_crud.get_future_meetups와 같은 조건:
start_at > now() AT TIME ZONE <CIVIL_TIMEZONE>, 토픽/호스트 필터, start_at 오름차순.

Revision ID: 002
Revises: 001
Create Date: 2025-09-01 00:00:01.000000

"""
from typing import Sequence, Union

from alembic import op

from thinklink.config import CIVIL_TIMEZONE

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

CREATE_FUNCTION_TEMPLATE = """
CREATE OR REPLACE FUNCTION get_future_meetups(
  p_topic TEXT DEFAULT NULL,
  p_limit INTEGER DEFAULT 20,
  p_offset INTEGER DEFAULT 0,
  p_user_id VARCHAR DEFAULT NULL
)
RETURNS TABLE(
  id VARCHAR,
  host_id VARCHAR,
  title VARCHAR,
  topic VARCHAR,
  description TEXT,
  start_at TIMESTAMP WITHOUT TIME ZONE,
  location VARCHAR,
  place_name VARCHAR,
  custom_location_details TEXT,
  capacity INTEGER,
  icebreaker TEXT,
  created_at TIMESTAMP WITH TIME ZONE,
  host_name VARCHAR,
  host_avatar_url VARCHAR
) AS $$
BEGIN
  RETURN QUERY
  SELECT
    m.id, m.host_id, m.title, m.topic, m.description, m.start_at,
    m.location, m.place_name, m.custom_location_details, m.capacity,
    m.icebreaker, m.created_at,
    p.full_name AS host_name,
    p.avatar_url AS host_avatar_url
  FROM meetups m
  LEFT JOIN profiles p ON m.host_id = p.id
  WHERE m.start_at > (now() AT TIME ZONE '{civil_timezone}')
    AND (p_topic IS NULL OR m.topic = p_topic)
    AND (p_user_id IS NULL OR m.host_id = p_user_id)
  ORDER BY m.start_at ASC, m.id ASC
  LIMIT p_limit OFFSET p_offset;
END;
$$ LANGUAGE plpgsql STABLE;
"""


def create_function_sql(civil_timezone: str = CIVIL_TIMEZONE) -> str:
    """앱과 같은 시민 타임존으로 함수 본문 생성. 타임존 변경 시 이 리비전을 다시 적용해야 함."""
    return CREATE_FUNCTION_TEMPLATE.format(civil_timezone=civil_timezone.replace("'", "''"))


def upgrade() -> None:
    if op.get_bind().dialect.name != "postgresql":
        return
    op.execute(create_function_sql())


def downgrade() -> None:
    if op.get_bind().dialect.name != "postgresql":
        return
    op.execute("DROP FUNCTION IF EXISTS get_future_meetups(text, integer, integer, varchar);")
