"""Explicit corrections applied on top of what inference found.

Every retyping goes through ``ApiModel.retype_method`` so a method's
parameter list, the global signature index and its class collection are
updated together.
"""

from __future__ import annotations

from typing import Iterable

from jdh2trans.config import EnumRule, OverrideTarget
from jdh2trans.exceptions import SignatureCollisionError, UnknownMethodError
from jdh2trans.inference.clustering import create_enum_from_constants
from jdh2trans.model import ApiModel, Const, InferredEnum, Method
from jdh2trans.order_contract import sort_once


def collect_values_by_prefix(model: ApiModel, prefix: str) -> list[Const]:
    return model.consts_with_prefix(prefix)


def create_enum(
    model: ApiModel,
    consts: Iterable[Const],
    name: str | None = None,
) -> InferredEnum | None:
    return create_enum_from_constants(model, consts, name=name, site="override")


def resolve_method(model: ApiModel, target: Method | str) -> Method:
    if isinstance(target, Method):
        method = model.methods.get(target.signature)
        if method is not target:
            raise UnknownMethodError(target.signature)
        return method
    method = model.methods.get(target)
    if method is None:
        raise UnknownMethodError(target)
    return method


def retype_parameter(
    model: ApiModel,
    target: Method | str,
    position: int,
    enum: InferredEnum,
) -> Method:
    method = resolve_method(model, target)
    if method.parameter(position) is None:
        raise UnknownMethodError(method.signature, position)
    if not model.retype_method(method, {position: enum}):
        raise SignatureCollisionError(method.signature)
    return method


def retype_return(model: ApiModel, target: Method | str, enum: InferredEnum) -> Method:
    method = resolve_method(model, target)
    if method.kind == "constructor":
        raise UnknownMethodError(method.signature, 0)
    if not model.retype_method(method, {0: enum}):
        raise SignatureCollisionError(method.signature)
    return method


def apply_enum_rules(model: ApiModel, rules: Iterable[EnumRule]) -> list[InferredEnum]:
    created: list[InferredEnum] = []
    for rule in rules:
        consts = collect_values_by_prefix(model, rule.prefix)
        if not consts:
            model.warn(
                "no_discoverable_name",
                rule.prefix,
                "enum rule matched no integer constants",
            )
            continue
        enum = create_enum(model, consts, rule.name)
        if enum is None:
            continue
        created.append(enum)
        for signature, positions in _group_targets(rule.targets).items():
            method = resolve_method(model, signature)
            for position in positions:
                if position == 0 and method.kind == "constructor":
                    raise UnknownMethodError(signature, 0)
                if position and method.parameter(position) is None:
                    raise UnknownMethodError(signature, position)
            model.retype_method(method, {position: enum for position in positions})
    return created


def _group_targets(targets: Iterable[OverrideTarget]) -> dict[str, list[int]]:
    grouped: dict[str, list[int]] = {}
    for target in targets:
        grouped.setdefault(target.signature, []).append(target.position)
    return {
        signature: sort_once(set(positions), source="_group_targets.positions")
        for signature, positions in grouped.items()
    }
