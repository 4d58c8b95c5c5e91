"""Build an ``ApiModel`` from a tokenized documentation set.

Parsing order is fixed: packages, constants, classes, then the fields of
every class, then every class's constructors and methods. Fields come
first so enum-bearing constant fields are known before any method falls
back to searching them by name.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field

from jdh2trans.config import InferenceConfig
from jdh2trans.exceptions import MissingDocumentationError
from jdh2trans.inference.resolution import ResolvedType, TypeSite, qualify_and_infer_type
from jdh2trans.ingest.adapter_contract import (
    ClassDocument,
    ConstRecord,
    DocumentSet,
    FieldDecl,
    MethodPrototype,
)
from jdh2trans.model import (
    INT_TYPES,
    ApiModel,
    ClassDecl,
    Const,
    Field,
    Method,
    Parameter,
)
from jdh2trans.naming import qualify_type, split_parameters, substitute_integer
from jdh2trans.order_contract import sort_once


@dataclass
class ModelAssembler:
    config: InferenceConfig = field(default_factory=InferenceConfig)

    def assemble(self, docs: DocumentSet) -> ApiModel:
        if not docs.packages:
            raise MissingDocumentationError("package list is empty")
        model = ApiModel(config=self.config)
        for name in sort_once(docs.packages, source="ModelAssembler.packages"):
            model.add_package(name)
        for record in sort_once(
            docs.constants,
            source="ModelAssembler.constants",
            key=lambda item: item.fullname,
        ):
            self._add_constant(model, record)

        documents = sort_once(
            docs.classes,
            source="ModelAssembler.classes",
            key=lambda item: item.name,
        )
        for doc in documents:
            model.add_class(ClassDecl(fullname=doc.name, package=doc.package, kind=doc.kind))
        for doc in documents:
            self._add_fields(model, doc)
        for doc in documents:
            self._add_methods(model, doc)
        return model

    # -- constants ----------------------------------------------------

    def _add_constant(self, model: ApiModel, record: ConstRecord) -> None:
        class_name, _, name = record.fullname.rpartition(".")
        type_name = record.type.strip()
        value = _int_value(record.value) if type_name in INT_TYPES else None
        if value is None and self.config.only_int_constants:
            return
        model.add_const(
            Const(
                fullname=record.fullname,
                name=name,
                class_name=class_name,
                package=_owning_package(model, class_name),
                type=type_name,
                value=value if value is not None else str(record.value),
            )
        )

    # -- fields -------------------------------------------------------

    def _add_fields(self, model: ApiModel, doc: ClassDocument) -> None:
        if doc.fields is None:
            model.warn("missing_section", doc.name, "no field detail section; fields skipped")
            return
        decl = model.classes[doc.name]
        for item in sort_once(doc.fields, source="ModelAssembler.fields", key=lambda f: f.name):
            hints = deque(item.hints)
            modifiers = tuple(item.modifiers.split())
            const = self._value_constant(model, doc, item, modifiers)
            if const is not None:
                decl.fields[item.name] = Field(
                    name=item.name,
                    type=qualify_type(item.type, doc.package, hints),
                    class_name=doc.name,
                    modifiers=modifiers,
                    const=const.fullname,
                )
                continue
            resolved = qualify_and_infer_type(
                model,
                TypeSite(
                    role="field",
                    name=item.name,
                    raw_type=item.type,
                    class_name=doc.name,
                    blocks=item.blocks,
                ),
                hints,
            )
            decl.fields[item.name] = Field(
                name=item.name,
                type=_current_type(resolved),
                class_name=doc.name,
                modifiers=modifiers,
                raw_type=resolved.qualified if resolved.enum is not None else None,
                enum=resolved.enum.fullname if resolved.enum is not None else None,
            )

    def _value_constant(
        self,
        model: ApiModel,
        doc: ClassDocument,
        item: FieldDecl,
        modifiers: tuple[str, ...],
    ) -> Const | None:
        """The constant a ``static final`` field stands for, if any.

        Integer constant fields missing from the constant table get a
        synthesized sequential value so they can still join an enum.
        """
        key = item.const_link or f"{doc.name}.{item.name}"
        known = model.consts.get(key)
        if known is not None:
            return known
        is_constant_field = (
            "static" in modifiers
            and "final" in modifiers
            and item.type.strip() in INT_TYPES
            and item.name == item.name.upper()
        )
        if not is_constant_field:
            return None
        return model.add_const(
            Const(
                fullname=key,
                name=key.rpartition(".")[2],
                class_name=doc.name,
                package=doc.package,
                type="int",
                value=_next_synthetic_value(model, doc.name),
                synthesized=True,
            )
        )

    # -- methods ------------------------------------------------------

    def _add_methods(self, model: ApiModel, doc: ClassDocument) -> None:
        if doc.methods is None:
            model.warn(
                "missing_section",
                doc.name,
                "no constructor or method detail section; methods skipped",
            )
            return
        for proto in sort_once(
            doc.methods,
            source="ModelAssembler.methods",
            key=lambda item: (not item.constructor, item.name, item.parameters),
        ):
            method = self._build_method(model, doc, proto)
            if method.signature in model.methods:
                _keep_documented_types(model, method)
            model.add_method(method)

    def _build_method(
        self,
        model: ApiModel,
        doc: ClassDocument,
        proto: MethodPrototype,
    ) -> Method:
        hints = deque(proto.hints)
        kind = "constructor" if proto.constructor else "method"
        returned: ResolvedType | None = None
        if kind == "method" and proto.return_type:
            returned = qualify_and_infer_type(
                model,
                TypeSite(
                    role="return",
                    name=proto.name,
                    raw_type=proto.return_type,
                    class_name=doc.name,
                    method_name=proto.name,
                    blocks=proto.blocks,
                ),
                hints,
            )
        resolved_params: list[tuple[str, ResolvedType]] = []
        for raw_type, name in split_parameters(proto.parameters):
            resolved_params.append(
                (
                    name,
                    qualify_and_infer_type(
                        model,
                        TypeSite(
                            role="param",
                            name=name,
                            raw_type=raw_type,
                            class_name=doc.name,
                            method_name=None if proto.constructor else proto.name,
                            blocks=proto.blocks,
                        ),
                        hints,
                    ),
                )
            )

        # Enum names are read only now: a later parameter of this same
        # prototype may have merged into, and renamed, an earlier one's enum.
        params = [
            Parameter(
                name=name,
                position=position,
                type=_current_type(resolved),
                raw_type=resolved.qualified if resolved.enum is not None else None,
                enum=resolved.enum.fullname if resolved.enum is not None else None,
            )
            for position, (name, resolved) in enumerate(resolved_params, start=1)
        ]
        method = Method(
            class_name=doc.name,
            name=proto.name,
            kind=kind,
            modifiers=tuple(proto.modifiers.split()),
            params=params,
        )
        if returned is not None:
            method.return_type = _current_type(returned)
            if returned.enum is not None:
                method.raw_return_type = returned.qualified
                method.return_enum = returned.enum.fullname
        method.signature = method.compute_signature()
        return method


def _keep_documented_types(model: ApiModel, method: Method) -> None:
    """Undo parameter enum substitution whose signature is already taken.

    Overloads such as ``f(int)`` and ``f(Integer)`` both map to the same
    enum; the later one keeps its documented types so neither is lost.
    """
    taken = method.signature
    for param in method.params:
        if param.enum is not None and param.raw_type is not None:
            param.type = param.raw_type
            param.raw_type = None
            param.enum = None
    method.signature = method.compute_signature()
    if method.signature != taken:
        model.warn(
            "signature_collision",
            method.signature,
            f"enum substitution would collide with {taken}; documented types kept",
        )


def _current_type(resolved: ResolvedType) -> str:
    if resolved.enum is None:
        return resolved.type
    return substitute_integer(resolved.qualified, resolved.enum.fullname)


def _int_value(value: object) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        text = value.strip().rstrip("lL")
        try:
            return int(text, 0)
        except ValueError:
            return None
    return None


def _owning_package(model: ApiModel, class_name: str) -> str:
    best = ""
    for name in model.packages:
        if class_name.startswith(name + ".") and len(name) > len(best):
            best = name
    return best or class_name.rpartition(".")[0]


def _next_synthetic_value(model: ApiModel, class_name: str) -> int:
    values = [
        const.value
        for const in model.consts.values()
        if const.class_name == class_name and isinstance(const.value, int) and const.is_int
    ]
    return max(values) + 1 if values else 0


def assemble_model(docs: DocumentSet, config: InferenceConfig | None = None) -> ApiModel:
    return ModelAssembler(config=config or InferenceConfig()).assemble(docs)
