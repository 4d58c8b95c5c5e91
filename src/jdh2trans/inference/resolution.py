"""Resolve the type of one parameter, return value or field."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Literal

from jdh2trans.inference.description import DescriptionContext, infer_from_description
from jdh2trans.inference.similarity import search_enum_by_name
from jdh2trans.ingest.adapter_contract import DocBlocks
from jdh2trans.model import ApiModel, InferredEnum
from jdh2trans.naming import (
    accessor_hint,
    is_integer_shaped,
    qualify_type,
    substitute_integer,
)

TypeRole = Literal["param", "return", "field"]


@dataclass(frozen=True)
class TypeSite:
    role: TypeRole
    name: str
    raw_type: str
    class_name: str
    method_name: str | None = None
    blocks: DocBlocks = DocBlocks()

    @property
    def label(self) -> str:
        if self.method_name is None:
            return f"{self.class_name}.{self.name}"
        return f"{self.class_name}.{self.method_name}:{self.role}:{self.name}"


@dataclass(frozen=True)
class ResolvedType:
    type: str
    # Qualified type before any enum substitution.
    qualified: str
    enum: InferredEnum | None = None


def locate_block(site: TypeSite) -> str | None:
    if site.role == "param":
        for entry in site.blocks.parameters:
            head = entry.split(None, 1)
            if head and head[0] == site.name:
                return entry
        return None
    if site.role == "return":
        return site.blocks.returns
    if site.blocks.see_also:
        return " ".join(site.blocks.see_also)
    return None


def qualify_and_infer_type(
    model: ApiModel,
    site: TypeSite,
    hints: deque[str],
) -> ResolvedType:
    config = model.config
    qualified = qualify_type(site.raw_type, model.package_of_class(site.class_name), hints)
    unchanged = ResolvedType(type=qualified, qualified=qualified)
    if not is_integer_shaped(qualified):
        return unchanged
    if (
        site.role == "param"
        and config.param_exclude is not None
        and config.param_exclude.search(site.name)
    ):
        return unchanged

    enum: InferredEnum | None = None
    block = locate_block(site)
    if block is not None:
        context = DescriptionContext(
            class_name=site.class_name,
            method_name=site.method_name,
            site=site.label,
        )
        enum = infer_from_description(model, block, context)
    if enum is None:
        enum = search_enum_by_name(
            model,
            _fallback_name(site, model),
            site.class_name,
            site=site.label,
        )
    if enum is None:
        return unchanged
    return ResolvedType(
        type=substitute_integer(qualified, enum.fullname),
        qualified=qualified,
        enum=enum,
    )


def _fallback_name(site: TypeSite, model: ApiModel) -> str:
    if site.role == "return" and site.method_name is not None:
        return accessor_hint(site.method_name, model.config) or site.method_name
    return site.name
