"""Validators shared by request schemas."""
from typing import Any


def reject_null(value: Any) -> Any:
    """Partial updates may omit a required column but never clear it."""
    if value is None:
        raise ValueError("Field cannot be null")
    return value
