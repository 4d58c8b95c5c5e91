"""Prefix clustering: turn a group of constants into an enum."""

from __future__ import annotations

from typing import Iterable

from jdh2trans.inference.merge import merge_enum
from jdh2trans.model import ApiModel, Const, EnumMember, InferredEnum
from jdh2trans.naming import (
    WORD_SEPARATOR,
    common_prefix,
    join_words,
    strip_prefix,
    to_const_case,
)


def create_enum_from_constants(
    model: ApiModel,
    consts: Iterable[Const],
    *,
    hint: str | None = None,
    name: str | None = None,
    site: str = "",
) -> InferredEnum | None:
    """Cluster ``consts`` into an enum and merge it into the registry.

    ``hint`` names the enum only when the constants share no prefix;
    ``name`` always wins over the computed prefix. Returns the registry
    instance, which may be a pre-existing enum the new group merged into,
    or ``None`` when no name can be found.
    """
    config = model.config
    members = {const.fullname: const for const in consts if const.is_int}
    if not members:
        return None
    ordered = model.sorted_consts(members)
    class_name = ordered[0].class_name
    stray = [const.fullname for const in ordered if const.class_name != class_name]
    if stray:
        model.warn(
            "ambiguous_description",
            site or class_name,
            f"constants outside {class_name} dropped from cluster: {', '.join(stray)}",
        )
        members = {const.fullname: const for const in ordered if const.class_name == class_name}

    prefix = common_prefix((const.name for const in members.values()), config.ignore_values)
    if prefix:
        recall_key = f"{class_name}.{join_words(prefix)}{WORD_SEPARATOR}"
        recalled = {
            const.fullname: const
            for const in model.consts_with_prefix(recall_key)
            if const.fullname not in members
        }
        if recalled:
            members.update(recalled)
            prefix = common_prefix(
                (const.name for const in members.values()), config.ignore_values
            )

    if name:
        enum_name = to_const_case(name)
    elif prefix:
        enum_name = join_words(prefix)
    else:
        enum_name = to_const_case(hint) if hint else ""
    if not enum_name:
        model.warn(
            "no_discoverable_name",
            site or class_name,
            "constants share no prefix and no name hint is available: "
            + ", ".join(sorted(members)),
        )
        return None

    enum = InferredEnum(
        class_name=class_name,
        package=model.package_of_class(class_name),
        name=enum_name,
        prefix=prefix,
    )
    consumed = model.sorted_consts(members)
    for const in consumed:
        assert isinstance(const.value, int)
        member_name = strip_prefix(const.name, prefix, config.ignore_values)
        existing = enum.members.get(const.value)
        if existing is not None:
            model.warn(
                "duplicate_value",
                const.fullname,
                f"value {const.value} already named {existing.name} in {enum.fullname}",
            )
            continue
        enum.members[const.value] = EnumMember(const=const.fullname, name=member_name)
    return merge_enum(model, enum, consumed)
