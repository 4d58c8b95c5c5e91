from __future__ import annotations

from jdh2trans.ingest.adapter_contract import DocumentAdapter
from jdh2trans.ingest.json_adapter import JsonDocumentAdapter
from jdh2trans.invariants import never


_ADAPTERS_BY_FORMAT: dict[str, DocumentAdapter] = {}


def register_adapter(adapter: DocumentAdapter) -> None:
    _ADAPTERS_BY_FORMAT[adapter.format_id.lower()] = adapter


def adapter_for_format(format_id: str) -> DocumentAdapter | None:
    return _ADAPTERS_BY_FORMAT.get(format_id.lower())


def resolve_adapter(format_id: str | None = None, *, default_format_id: str = "json") -> DocumentAdapter:
    if format_id is not None:
        adapter = adapter_for_format(format_id)
        if adapter is None:
            never("unknown document adapter", format_id=format_id)
        return adapter
    # Import-time registration guarantees a canonical fallback adapter.
    return _ADAPTERS_BY_FORMAT[default_format_id.lower()]


def registered_formats() -> list[str]:
    return sorted(_ADAPTERS_BY_FORMAT)


register_adapter(JsonDocumentAdapter())
