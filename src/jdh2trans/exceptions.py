"""Exception hierarchy for jdh2trans.

Only structural failures are exceptions. Inference ambiguity is recorded as
``Diagnostic`` data on the model and never raised.
"""

from __future__ import annotations


class Jdh2TransError(RuntimeError):
    """Base class for every error raised by jdh2trans."""


class MissingDocumentationError(Jdh2TransError):
    """A required top-level documentation file is absent.

    The package list and the constant table are both mandatory; without them
    no model can be assembled.
    """

    def __init__(self, message: str, *, path: str = "") -> None:
        super().__init__(message)
        self.path = path


class ConfigError(Jdh2TransError):
    """Configuration value could not be interpreted."""

    def __init__(self, message: str, *, key: str = "") -> None:
        super().__init__(message)
        self.key = key


class UnknownMethodError(Jdh2TransError, KeyError):
    """Override target does not name a known method or parameter."""

    def __init__(self, signature: str, position: int | None = None) -> None:
        detail = signature if position is None else f"{signature} @ {position}"
        super().__init__(f"unknown override target: {detail}")
        self.signature = signature
        self.position = position

    def __str__(self) -> str:
        return str(self.args[0])


class SignatureCollisionError(Jdh2TransError):
    """A manual retype would give a method a signature already in use.

    The model is left unchanged and a ``signature_collision`` diagnostic
    is recorded.
    """

    def __init__(self, signature: str) -> None:
        super().__init__(f"retyping {signature} would collide with another method")
        self.signature = signature


class SnapshotError(Jdh2TransError):
    """Snapshot payload is unreadable or was written by another version."""


class NeverThrown(Jdh2TransError):
    """Raised by ``never()`` when a path assumed unreachable is reached."""

    def __init__(self, message: str, *, env: dict[str, object] | None = None) -> None:
        super().__init__(message)
        self.env = dict(env or {})
