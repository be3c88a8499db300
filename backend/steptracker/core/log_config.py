import logging

from steptracker.core.config import settings


def configure_logging(level: str | None = None) -> None:
    """Configure root logging once. Safe to call from every entrypoint."""
    root = logging.getLogger()
    if root.handlers:
        return

    level_name = (level or settings.log_level or "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
