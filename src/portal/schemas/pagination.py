"""Keyset pagination: response envelope and cursor encoding.

A cursor names the last row of a page by its sort value and its id, so
rows that share a sort value are split across pages without loss.
"""

import base64
import json
from datetime import datetime
from typing import Generic, TypeVar
from uuid import UUID

from pydantic import BaseModel, Field

T = TypeVar("T")


class PaginatedResponse(BaseModel, Generic[T]):
    """One page of results. Pass ``next_cursor`` back to fetch the next one."""

    items: list[T]
    next_cursor: str | None = Field(
        default=None,
        description="Opaque cursor for the next page; null on the last page.",
    )
    has_more: bool = Field(
        default=False,
        description="Whether more items follow this page.",
    )


def encode_cursor(sort_value: datetime, row_id: UUID) -> str:
    """Encode the position just after the row ``(sort_value, row_id)``."""
    payload = json.dumps({"at": sort_value.isoformat(), "id": str(row_id)})
    return base64.urlsafe_b64encode(payload.encode()).decode()


def decode_cursor(cursor: str) -> tuple[datetime, UUID]:
    """Decode a cursor from ``encode_cursor``.

    Raises:
        ValueError: If the cursor is malformed
    """
    try:
        payload = json.loads(base64.urlsafe_b64decode(cursor.encode()))
        return datetime.fromisoformat(payload["at"]), UUID(payload["id"])
    except (ValueError, TypeError, KeyError) as e:
        raise ValueError("Invalid cursor") from e
