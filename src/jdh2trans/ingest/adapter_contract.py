from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, Protocol, runtime_checkable


@dataclass(frozen=True)
class DocBlocks:
    """Prose attached to one prototype, already split by section."""

    # One "<name> - <description>" entry per documented parameter.
    parameters: tuple[str, ...] = ()
    returns: str | None = None
    see_also: tuple[str, ...] = ()


@dataclass(frozen=True)
class ConstRecord:
    fullname: str
    type: str
    value: int | float | bool | str


@dataclass(frozen=True)
class FieldDecl:
    modifiers: str
    type: str
    name: str
    const_link: str | None = None
    blocks: DocBlocks = field(default_factory=DocBlocks)
    hints: tuple[str, ...] = ()


@dataclass(frozen=True)
class MethodPrototype:
    modifiers: str
    name: str
    parameters: str = ""
    return_type: str | None = None
    constructor: bool = False
    blocks: DocBlocks = field(default_factory=DocBlocks)
    hints: tuple[str, ...] = ()


@dataclass(frozen=True)
class ClassDocument:
    name: str
    package: str
    kind: Literal["class", "interface"] = "class"
    # None marks a missing detail section, not an empty one.
    fields: tuple[FieldDecl, ...] | None = ()
    methods: tuple[MethodPrototype, ...] | None = ()


@dataclass(frozen=True)
class DocumentSet:
    packages: tuple[str, ...]
    constants: tuple[ConstRecord, ...]
    classes: tuple[ClassDocument, ...] = ()


@runtime_checkable
class DocumentAdapter(Protocol):
    format_id: str

    def load(self, path: Path) -> DocumentSet: ...
