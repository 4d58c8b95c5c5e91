"""Deterministic ordering for every identity-affecting iteration.

Which constant wins a naming tie and which class is visited first must not
depend on container order, so callers route iteration through ``sort_once``
with a ``source`` label that names the call site.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, TypeVar

from jdh2trans.invariants import never


T = TypeVar("T")


def sort_once(
    values: Iterable[T],
    *,
    source: str,
    key: Callable[[T], Any] | None = None,
    reverse: bool = False,
) -> list[T]:
    """Sort unconditionally; canonical order defines identity here.

    Keys that cannot be compared mean a caller mixed value kinds, which is
    reported against ``source`` through ``never()``.
    """
    items = list(values)
    try:
        return sorted(items, key=key, reverse=reverse)
    except TypeError as error:
        never(
            "incomparable ordering keys",
            source=source,
            count=len(items),
            reverse=reverse,
            error=str(error),
        )
