import logging
import sys
from typing import Iterable, List

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
NOISY_LOGGERS = ("httpx", "httpcore", "multipart")
MASK = "***"


class RedactSecrets(logging.Filter):
    """Masks credentials in the rendered message before any handler sees it."""

    def __init__(self, secrets: Iterable[str] = ()) -> None:
        super().__init__()
        self.secrets: List[str] = [s.strip() for s in secrets if s and s.strip()]

    def filter(self, record: logging.LogRecord) -> bool:
        if not self.secrets:
            return True
        message = record.getMessage()
        for secret in self.secrets:
            message = message.replace(secret, MASK)
        record.msg, record.args = message, None
        return True


def level_from_name(level: str) -> int:
    numeric = logging.getLevelName((level or "").upper())
    return numeric if isinstance(numeric, int) else logging.INFO


def setup_logging(level: str = "INFO", secrets: Iterable[str] = ()) -> None:
    """
    One stdout handler on the root logger; ``secrets`` never reach the output.
    Third-party HTTP loggers stay at WARNING or above.
    """
    numeric_level = level_from_name(level)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(numeric_level)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT))
    handler.addFilter(RedactSecrets(secrets))

    root = logging.getLogger()
    root.setLevel(numeric_level)
    root.handlers.clear()  # uvicorn --reload re-imports the app
    root.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))
