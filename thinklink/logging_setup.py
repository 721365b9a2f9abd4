"""
로깅 설정.
"""

import logging

LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"

_configured = False


def setup_logging(level: str = "INFO") -> None:
    """
    루트 로거 설정 (프로세스당 1회).

    Args:
        level: 로그 레벨 이름 (예: "INFO", "DEBUG")
    """
    global _configured
    if _configured:
        return

    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)

    # 라이브러리 로그는 경고 이상만
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)

    _configured = True
