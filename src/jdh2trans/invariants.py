"""Invariant markers."""

from __future__ import annotations

from typing import NoReturn

from jdh2trans.exceptions import NeverThrown


def never(reason: str = "", **env: object) -> NoReturn:
    """Mark a code path as intentionally unreachable.

    The optional env payload travels on the raised exception for diagnosis;
    it is not evaluated.
    """
    raise NeverThrown(reason or "never() marker reached", env=env)
