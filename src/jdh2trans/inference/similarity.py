"""Fallback search for an enum by identifier-name similarity."""

from __future__ import annotations

from jdh2trans.inference.clustering import create_enum_from_constants
from jdh2trans.model import ApiModel, Const, InferredEnum
from jdh2trans.naming import (
    WORD_SEPARATOR,
    common_prefix,
    join_words,
    to_const_case,
    words,
)
from jdh2trans.order_contract import sort_once


def search_key(model: ApiModel, name: str) -> str:
    """``featureId`` -> ``FEATURE``: const-cased, final word dropped."""
    key_words = words(to_const_case(name, model.config.param_prefix_cleanup))
    if len(key_words) > 1:
        key_words = key_words[:-1]
    return join_words(key_words)


def search_enum_by_name(
    model: ApiModel,
    name: str,
    class_name: str,
    *,
    site: str = "",
) -> InferredEnum | None:
    key = search_key(model, name)
    if not key:
        return None
    lead = key + WORD_SEPARATOR
    for tier, pool in _tiers(model, class_name):
        candidates = [const for const in pool if const.name.startswith(lead)]
        cluster = _usable_cluster(model, candidates, class_name)
        if cluster is None:
            continue
        enum = create_enum_from_constants(model, cluster, hint=key, site=site or tier)
        if enum is not None:
            return enum
    return None


def _tiers(model: ApiModel, class_name: str) -> list[tuple[str, list[Const]]]:
    package = model.package_of_class(class_name)
    tiers: list[tuple[str, list[Const]]] = []

    decl = model.classes.get(class_name)
    field_consts: list[Const] = []
    if decl is not None:
        for field_name in sort_once(decl.fields, source="_tiers.fields"):
            key = decl.fields[field_name].const
            const = model.consts.get(key) if key else None
            if const is not None and const.is_int:
                field_consts.append(const)
    tiers.append(("class_fields", field_consts))

    tiers.append(
        ("package", [const for const in model.int_consts() if const.package == package])
    )
    if model.config.search_subpackages and package:
        tiers.append(
            (
                "subpackages",
                [
                    const
                    for const in model.int_consts()
                    if const.package.startswith(package + ".")
                ],
            )
        )
    return tiers


def _usable_cluster(
    model: ApiModel,
    candidates: list[Const],
    class_name: str,
) -> list[Const] | None:
    by_class: dict[str, list[Const]] = {}
    for const in candidates:
        by_class.setdefault(const.class_name, []).append(const)
    owners = sort_once(
        by_class,
        source="_usable_cluster.owners",
        key=lambda owner: (owner != class_name, owner),
    )
    for owner in owners:
        group = by_class[owner]
        if common_prefix((const.name for const in group), model.config.ignore_values):
            return group
    return None
