"""Opaque cursor helpers shared by the paginated list endpoints."""

import base64
import json
from datetime import date


def _encode(payload: dict[str, object]) -> str:
    return base64.b64encode(json.dumps(payload).encode()).decode()


def _decode(cursor: str) -> dict[str, object]:
    return json.loads(base64.b64decode(cursor.encode()).decode())


def cursor_encode(last_id: int) -> str:
    """Encode a BIGINT primary key into an opaque Base64 cursor string."""
    return _encode({"id": last_id})


def cursor_decode(cursor: str | None) -> int | None:
    """Decode a cursor string back to the last seen id. Returns None on error."""
    if cursor is None:
        return None
    try:
        return int(_decode(cursor)["id"])  # type: ignore[call-overload]
    except Exception:
        return None


def date_cursor_encode(last_date: date, last_id: int) -> str:
    """Cursor for lists ordered by (date DESC, id DESC)."""
    return _encode({"date": last_date.isoformat(), "id": last_id})


def date_cursor_decode(cursor: str | None) -> tuple[date, int] | None:
    if cursor is None:
        return None
    try:
        payload = _decode(cursor)
        return date.fromisoformat(str(payload["date"])), int(payload["id"])  # type: ignore[call-overload]
    except Exception:
        return None
