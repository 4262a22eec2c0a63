"""Shared value parsers."""

from __future__ import annotations

from typing import Any

_MAX_MODE = 0o777


def parse_file_mode(value: Any) -> Any:
    """Parse a file mode, reading strings as octal.

    Integers are taken as already-decoded mode bits (YAML ``0644`` loads as
    420). Strings such as ``"0640"`` or ``"640"`` are octal. Only permission
    bits are accepted, which rejects most octal-looking decimals like ``644``.
    """
    if isinstance(value, str):
        try:
            value = int(value, 8)
        except ValueError as e:
            raise ValueError(f"Invalid octal mode: {value!r}") from e
    if isinstance(value, int) and not isinstance(value, bool):
        if not 0 <= value <= _MAX_MODE:
            raise ValueError(
                f"File mode {value} ({oct(value)}) is not a permission mode; "
                "quote octal modes, e.g. \"0644\""
            )
    return value
