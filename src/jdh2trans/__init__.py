"""jdh2trans package root."""

from jdh2trans.exceptions import (
    ConfigError,
    Jdh2TransError,
    MissingDocumentationError,
    NeverThrown,
    SignatureCollisionError,
    SnapshotError,
    UnknownMethodError,
)
from jdh2trans.invariants import never

__all__ = [
    "__version__",
    "ConfigError",
    "Jdh2TransError",
    "MissingDocumentationError",
    "NeverThrown",
    "SignatureCollisionError",
    "SnapshotError",
    "UnknownMethodError",
    "never",
]

__version__ = "0.2.0"
