from __future__ import annotations

import json
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
for entry in (ROOT / "src", ROOT):
    if str(entry) not in sys.path:
        sys.path.insert(0, str(entry))


import pytest

from tests.model_helpers import pen_documents


@pytest.fixture
def write_doc_dir():
    """Write a tokenized documentation directory for the JSON adapter."""

    def _write(
        path: Path,
        *,
        packages: list[str],
        constants: list[dict[str, object]],
        classes: list[dict[str, object]] | None = None,
    ) -> Path:
        path.mkdir(parents=True, exist_ok=True)
        (path / "package-list").write_text("\n".join(packages) + "\n", encoding="utf-8")
        (path / "constant-values.json").write_text(json.dumps(constants), encoding="utf-8")
        if classes is not None:
            (path / "classes.json").write_text(json.dumps(classes), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def pen_doc_dir(tmp_path: Path, write_doc_dir) -> Path:
    return write_doc_dir(
        tmp_path / "docs",
        packages=["com.x", "com.y"],
        constants=[
            {"fullname": "com.x.Pen.PEN_TYPE_FINGER", "type": "int", "value": 0},
            {"fullname": "com.x.Pen.PEN_TYPE_STYLUS", "type": "int", "value": 1},
            {"fullname": "com.x.Pen.PEN_TYPE_ERASER", "type": "int", "value": 2},
            {"fullname": "com.x.Pen.LABEL", "type": "String", "value": "pen"},
            {"fullname": "com.y.Dial.SPEED_SLOW", "type": "int", "value": 10},
            {"fullname": "com.y.Dial.SPEED_FAST", "type": "int", "value": 20},
        ],
        classes=[
            {
                "name": "com.x.Pen",
                "package": "com.x",
                "fields": [
                    {
                        "modifiers": "public static final",
                        "type": "int",
                        "name": "PEN_TYPE_FINGER",
                    },
                    {
                        "modifiers": "public",
                        "type": "int",
                        "name": "currentType",
                        "see_also": ["PEN_TYPE_FINGER", "PEN_TYPE_STYLUS"],
                    },
                ],
                "methods": [
                    {
                        "modifiers": "public",
                        "name": "setType",
                        "parameters": "int type",
                        "return_type": "void",
                        "parameter_docs": [
                            "type - one of PEN_TYPE_FINGER, PEN_TYPE_STYLUS or PEN_TYPE_ERASER."
                        ],
                    },
                    {
                        "modifiers": "public",
                        "name": "getType",
                        "return_type": "int",
                        "returns_doc": "the current type, PEN_TYPE_FINGER or PEN_TYPE_ERASER.",
                    },
                    {"modifiers": "public", "name": "Pen", "constructor": True},
                ],
            },
            {
                "name": "com.y.Dial",
                "package": "com.y",
                "fields": None,
                "methods": [
                    {
                        "modifiers": "public",
                        "name": "setSpeed",
                        "parameters": "int speedValue",
                        "return_type": "void",
                    }
                ],
            },
        ],
    )


@pytest.fixture
def pen_docs():
    return pen_documents()
