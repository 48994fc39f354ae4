from __future__ import annotations

from typing import Annotated, Any

from pydantic import StringConstraints

# Trimmed, required, fits a VARCHAR(255) column.
Name255 = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]
NonEmptyText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


def reject_explicit_nulls(data: Any) -> Any:
    """
    Partial updates may omit a field but may not send ``null`` for it;
    every column they touch is NOT NULL.
    """
    if isinstance(data, dict):
        nulls = sorted(k for k, v in data.items() if v is None)
        if nulls:
            raise ValueError(f"Fields cannot be null: {', '.join(nulls)}")
    return data
