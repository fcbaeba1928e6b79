import logging
import sys


LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s - %(message)s"


def setup_logging(level: str = "INFO") -> None:
    """Настройка корневого логгера приложения"""
    root = logging.getLogger("codedpad")
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    if root.handlers:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    root.addHandler(handler)
