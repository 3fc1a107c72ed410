import logging
import sys

from importhub.config import Settings

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def configure_logging(settings: Settings) -> None:
    """Single stream handler on the `importhub` logger tree; safe to call more than once."""
    level = logging.DEBUG if settings.debug else getattr(logging, settings.log_level.upper(), logging.INFO)

    root = logging.getLogger("importhub")
    root.setLevel(level)
    if not any(getattr(h, "_importhub", False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._importhub = True
        root.addHandler(handler)
