"""Load a tokenized documentation set from a directory of JSON files.

Layout::

    <dir>/package-list           javadoc package list, one name per line
    <dir>/constant-values.json   list of {fullname, type, value}
    <dir>/classes.json           list of class documents (optional)

The first two are mandatory. A class document whose ``fields`` or
``methods`` entry is ``null`` has no such detail section.
"""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from jdh2trans.exceptions import MissingDocumentationError
from jdh2trans.ingest.adapter_contract import (
    ClassDocument,
    ConstRecord,
    DocBlocks,
    DocumentSet,
    FieldDecl,
    MethodPrototype,
)
from jdh2trans.schema import ClassDocDTO, ConstantDocDTO, FieldDocDTO, MethodDocDTO

PACKAGE_LIST_NAME = "package-list"
CONSTANTS_NAME = "constant-values.json"
CLASSES_NAME = "classes.json"

_CONSTANTS_ADAPTER = TypeAdapter(list[ConstantDocDTO])
_CLASSES_ADAPTER = TypeAdapter(list[ClassDocDTO])


class JsonDocumentAdapter:
    format_id = "json"

    def load(self, path: Path) -> DocumentSet:
        packages = self._read_package_list(path / PACKAGE_LIST_NAME)
        constants = self._read_json(path / CONSTANTS_NAME, _CONSTANTS_ADAPTER, required=True)
        classes = self._read_json(path / CLASSES_NAME, _CLASSES_ADAPTER, required=False)
        return DocumentSet(
            packages=tuple(packages),
            constants=tuple(
                ConstRecord(fullname=item.fullname, type=item.type, value=item.value)
                for item in constants or []
            ),
            classes=tuple(_class_document(item) for item in classes or []),
        )

    def _read_package_list(self, path: Path) -> list[str]:
        try:
            raw = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise MissingDocumentationError(
                f"package list not found: {path}", path=str(path)
            ) from exc
        return [line.strip() for line in raw.splitlines() if line.strip()]

    def _read_json(self, path: Path, adapter: TypeAdapter, *, required: bool):
        try:
            raw = path.read_text(encoding="utf-8")
        except OSError as exc:
            if required:
                raise MissingDocumentationError(
                    f"required documentation file not found: {path}", path=str(path)
                ) from exc
            return None
        try:
            return adapter.validate_python(json.loads(raw))
        except (json.JSONDecodeError, ValidationError) as exc:
            raise MissingDocumentationError(
                f"documentation file is not usable: {path}: {exc}", path=str(path)
            ) from exc


def _field_decl(item: FieldDocDTO) -> FieldDecl:
    return FieldDecl(
        modifiers=item.modifiers,
        type=item.type,
        name=item.name,
        const_link=item.const_link,
        blocks=DocBlocks(see_also=tuple(item.see_also)),
        hints=tuple(item.hints),
    )


def _method_prototype(item: MethodDocDTO) -> MethodPrototype:
    return MethodPrototype(
        modifiers=item.modifiers,
        name=item.name,
        parameters=item.parameters,
        return_type=item.return_type,
        constructor=item.constructor,
        blocks=DocBlocks(
            parameters=tuple(item.parameter_docs),
            returns=item.returns_doc,
            see_also=tuple(item.see_also),
        ),
        hints=tuple(item.hints),
    )


def _class_document(item: ClassDocDTO) -> ClassDocument:
    return ClassDocument(
        name=item.name,
        package=item.package,
        kind=item.kind,
        fields=None if item.fields is None else tuple(_field_decl(f) for f in item.fields),
        methods=None
        if item.methods is None
        else tuple(_method_prototype(m) for m in item.methods),
    )
