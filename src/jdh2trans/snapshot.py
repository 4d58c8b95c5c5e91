"""Save and restore a parsed model.

A restored model produces the same report bytes as the model it was taken
from. Enums are written once, in the registry section; classes and
constants refer to them by fully-qualified name, so restoring rebuilds a
single shared instance per enum.
"""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import ValidationError

from jdh2trans.config import InferenceConfig
from jdh2trans.exceptions import SnapshotError
from jdh2trans.model import (
    ApiModel,
    ClassDecl,
    Const,
    Diagnostic,
    EnumMember,
    Field,
    InferredEnum,
    Method,
    Parameter,
)
from jdh2trans.order_contract import sort_once
from jdh2trans.runtime.stable_encode import stable_text
from jdh2trans.schema import (
    DiagnosticDTO,
    SnapshotClassDTO,
    SnapshotConstDTO,
    SnapshotDTO,
    SnapshotEnumDTO,
    SnapshotFieldDTO,
    SnapshotMemberDTO,
    SnapshotMethodDTO,
    SnapshotParameterDTO,
)

SNAPSHOT_VERSION = 1


def build_snapshot(model: ApiModel) -> SnapshotDTO:
    consts = [
        SnapshotConstDTO(
            fullname=const.fullname,
            name=const.name,
            class_name=const.class_name,
            package=const.package,
            type=const.type,
            value=const.value,
            claimed_by=const.claimed_by,
            synthesized=const.synthesized,
        )
        for const in model.sorted_consts()
    ]
    classes = [
        _class_dto(model.classes[name])
        for name in sort_once(model.classes, source="build_snapshot.classes")
    ]
    enums = []
    for key in sort_once(model.enums, source="build_snapshot.enums"):
        enum = model.enums[key]
        enums.append(
            SnapshotEnumDTO(
                class_name=enum.class_name,
                package=enum.package,
                name=enum.name,
                prefix=list(enum.prefix),
                members=[
                    SnapshotMemberDTO(value=value, const=enum.members[value].const, name=name)
                    for value, name in enum.member_pairs()
                ],
            )
        )
    return SnapshotDTO(
        version=SNAPSHOT_VERSION,
        packages=sort_once(model.packages, source="build_snapshot.packages"),
        consts=consts,
        classes=classes,
        enums=enums,
        diagnostics=[
            DiagnosticDTO(kind=item.kind, site=item.site, message=item.message)
            for item in model.diagnostics
        ],
    )


def _class_dto(decl: ClassDecl) -> SnapshotClassDTO:
    fields = [
        SnapshotFieldDTO(
            name=fld.name,
            type=fld.type,
            modifiers=list(fld.modifiers),
            const=fld.const,
            raw_type=fld.raw_type,
            enum=fld.enum,
        )
        for fld in (
            decl.fields[name] for name in sort_once(decl.fields, source="_class_dto.fields")
        )
    ]
    methods = [
        SnapshotMethodDTO(
            name=method.name,
            kind=method.kind,
            modifiers=list(method.modifiers),
            params=[
                SnapshotParameterDTO(
                    name=param.name,
                    position=param.position,
                    type=param.type,
                    raw_type=param.raw_type,
                    enum=param.enum,
                )
                for param in method.params
            ],
            return_type=method.return_type,
            raw_return_type=method.raw_return_type,
            return_enum=method.return_enum,
            signature=method.signature,
        )
        for method in decl.all_methods()
    ]
    return SnapshotClassDTO(
        fullname=decl.fullname,
        package=decl.package,
        kind=decl.kind,
        fields=fields,
        methods=methods,
    )


def dump_snapshot(model: ApiModel) -> str:
    return stable_text(build_snapshot(model).model_dump())


def write_snapshot(model: ApiModel, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dump_snapshot(model), encoding="utf-8")


def load_snapshot(text: str, config: InferenceConfig | None = None) -> ApiModel:
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise SnapshotError(f"snapshot is not valid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise SnapshotError("snapshot must be a JSON object")
    version = payload.get("version")
    if version != SNAPSHOT_VERSION:
        raise SnapshotError(
            f"unsupported snapshot version={version!r}; expected {SNAPSHOT_VERSION}"
        )
    try:
        snapshot = SnapshotDTO.model_validate(payload)
    except ValidationError as exc:
        raise SnapshotError(f"snapshot does not match schema: {exc}") from exc
    return restore_model(snapshot, config)


def read_snapshot(path: Path, config: InferenceConfig | None = None) -> ApiModel:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SnapshotError(f"cannot read snapshot {path}: {exc}") from exc
    return load_snapshot(text, config)


def restore_model(snapshot: SnapshotDTO, config: InferenceConfig | None = None) -> ApiModel:
    model = ApiModel(config=config or InferenceConfig())
    for name in snapshot.packages:
        model.add_package(name)
    for item in snapshot.consts:
        model.add_const(
            Const(
                fullname=item.fullname,
                name=item.name,
                class_name=item.class_name,
                package=item.package,
                type=item.type,
                value=item.value,
                claimed_by=item.claimed_by,
                synthesized=item.synthesized,
            )
        )
    for item in snapshot.classes:
        decl = model.add_class(
            ClassDecl(fullname=item.fullname, package=item.package, kind=item.kind)
        )
        for fld in item.fields:
            decl.fields[fld.name] = Field(
                name=fld.name,
                type=fld.type,
                class_name=item.fullname,
                modifiers=tuple(fld.modifiers),
                const=fld.const,
                raw_type=fld.raw_type,
                enum=fld.enum,
            )
    for item in snapshot.enums:
        model.register_enum(
            InferredEnum(
                class_name=item.class_name,
                package=item.package,
                name=item.name,
                prefix=tuple(item.prefix),
                members={
                    member.value: EnumMember(const=member.const, name=member.name)
                    for member in item.members
                },
            )
        )
    for item in snapshot.classes:
        for entry in item.methods:
            model.add_method(
                Method(
                    class_name=item.fullname,
                    name=entry.name,
                    kind=entry.kind,
                    modifiers=tuple(entry.modifiers),
                    params=[
                        Parameter(
                            name=param.name,
                            position=param.position,
                            type=param.type,
                            raw_type=param.raw_type,
                            enum=param.enum,
                        )
                        for param in entry.params
                    ],
                    return_type=entry.return_type,
                    raw_return_type=entry.raw_return_type,
                    return_enum=entry.return_enum,
                    signature=entry.signature,
                )
            )
    model.diagnostics.extend(
        Diagnostic(kind=item.kind, site=item.site, message=item.message)
        for item in snapshot.diagnostics
    )
    return model
