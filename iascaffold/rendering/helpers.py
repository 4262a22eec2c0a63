"""Helper functions exposed to template bodies."""

from __future__ import annotations

from typing import Callable


def indent(prefix: int | str) -> Callable[[str], str]:
    """Build a transform that prefixes every line of a text block.

    A non-negative integer (or a string of digits) is taken as a number of
    spaces; anything else is used literally.

    Example:
        ``<: indent(4)(snippet) :>``
    """
    if isinstance(prefix, int) and not isinstance(prefix, bool) and prefix >= 0:
        prefix = " " * prefix
    elif isinstance(prefix, str) and prefix.isdigit():
        prefix = " " * int(prefix)
    else:
        prefix = str(prefix)

    def transform(text: str) -> str:
        lines = str(text).split("\n")
        while lines and lines[-1] == "":
            lines.pop()
        return "\n".join(f"{prefix}{line}" for line in lines)

    return transform


TEMPLATE_FUNCTIONS = {
    "indent": indent,
}
