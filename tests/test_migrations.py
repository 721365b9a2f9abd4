import importlib.util
from pathlib import Path

from thinklink.config import CIVIL_TIMEZONE

VERSIONS = Path(__file__).resolve().parent.parent / "alembic" / "versions"


def _load_revision(filename: str):
    spec = importlib.util.spec_from_file_location(filename[:-3], VERSIONS / filename)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_future_meetups_function_uses_configured_zone():
    revision = _load_revision("002_get_future_meetups_function.py")

    assert f"now() AT TIME ZONE '{CIVIL_TIMEZONE}'" in revision.create_function_sql()
    sql = revision.create_function_sql("Europe/London")
    assert "now() AT TIME ZONE 'Europe/London'" in sql
    assert "Asia/Jerusalem" not in sql
