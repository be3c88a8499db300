from fastapi import Header

from steptracker.core.config import settings


def current_user_id(x_user_id: str | None = Header(None, alias="X-User-Id")) -> str:
    """Caller identity. There is no auth layer; the header is trusted as-is."""
    return (x_user_id or "").strip() or settings.default_user_id
