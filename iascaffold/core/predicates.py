"""Normalisation of template applicability predicates."""

from __future__ import annotations

from typing import Any, Callable, Sequence

from .errors import InvalidConfigurationError

Predicate = Callable[[Any], bool]


class AnyOf:
    """Predicate that holds when any of its members holds."""

    def __init__(self, predicates: Sequence[Predicate]) -> None:
        self.predicates = tuple(predicates)

    def __call__(self, context: Any) -> bool:
        return any(predicate(context) for predicate in self.predicates)

    def __repr__(self) -> str:
        return f"AnyOf({list(self.predicates)!r})"


def normalize_allow(allow: Any) -> Predicate:
    """Normalise an ``allow`` value to a single predicate.

    Args:
        allow: A callable, or a list/tuple of callables

    Returns:
        A callable taking the context and returning a bool

    Raises:
        InvalidConfigurationError: If ``allow`` is neither form
    """
    if isinstance(allow, (list, tuple)):
        for member in allow:
            if not callable(member):
                raise InvalidConfigurationError(
                    f"Cannot use {type(member).__name__} as a predicate"
                )
        return AnyOf(allow)

    if callable(allow):
        return allow

    raise InvalidConfigurationError(
        f"Cannot use {type(allow).__name__} as a predicate"
    )
