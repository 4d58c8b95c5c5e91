from jdh2trans.ingest.adapter_contract import (
    ClassDocument,
    ConstRecord,
    DocBlocks,
    DocumentAdapter,
    DocumentSet,
    FieldDecl,
    MethodPrototype,
)
from jdh2trans.ingest.json_adapter import JsonDocumentAdapter


def resolve_adapter(format_id=None, *, default_format_id="json"):
    from jdh2trans.ingest.registry import resolve_adapter as _resolve_adapter

    return _resolve_adapter(format_id, default_format_id=default_format_id)


__all__ = [
    "ClassDocument",
    "ConstRecord",
    "DocBlocks",
    "DocumentAdapter",
    "DocumentSet",
    "FieldDecl",
    "JsonDocumentAdapter",
    "MethodPrototype",
    "resolve_adapter",
]
