from __future__ import annotations

import json
from typing import Mapping

from jdh2trans.json_types import JSONValue
from jdh2trans.order_contract import sort_once


def stable_text(value: object, *, indent: int | None = 2) -> str:
    """Encode ``value`` as canonical JSON text.

    Mapping keys are sorted lexically once per mapping; sequences keep their
    order; sets become sorted lists. Two equal models always encode to the
    same bytes, which is what the snapshot round-trip relies on.
    """
    normalized = stable_json_value(value, source="stable_encode.stable_text")
    separators = (",", ":") if indent is None else (",", ": ")
    text = json.dumps(
        normalized,
        indent=indent,
        separators=separators,
        sort_keys=False,
        ensure_ascii=False,
    )
    return text if indent is None else text + "\n"


def stable_json_value(value: object, *, source: str) -> JSONValue:
    if isinstance(value, Mapping):
        keys = sort_once(
            (str(key) for key in value),
            source=f"{source}.mapping_keys",
        )
        lookup = {str(key): item for key, item in value.items()}
        return {
            key: stable_json_value(lookup[key], source=f"{source}.{key}")
            for key in keys
        }
    if isinstance(value, (list, tuple)):
        return [stable_json_value(item, source=f"{source}.item") for item in value]
    if isinstance(value, (set, frozenset)):
        items = [stable_json_value(item, source=f"{source}.set_item") for item in value]
        return sort_once(
            items,
            source=f"{source}.set_items",
            key=lambda item: (type(item).__name__, stable_text(item, indent=None)),
        )
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    raise TypeError(
        "stable_json_value does not support value type "
        f"{type(value).__name__} at {source}"
    )
