"""Reconcile independently discovered versions of the same enum."""

from __future__ import annotations

from typing import Sequence

from jdh2trans.model import ApiModel, Const, EnumMember, InferredEnum
from jdh2trans.naming import WORD_SEPARATOR, is_word_prefix, join_words
from jdh2trans.order_contract import sort_once


def find_merge_target(
    model: ApiModel,
    enum: InferredEnum,
    consumed: Sequence[Const] = (),
) -> InferredEnum | None:
    """Existing enum that ``enum`` is another discovery of.

    Same fully-qualified name first; otherwise an enum of the same class
    that already claims one of the consumed constants and whose prefix is
    compatible (one a word-prefix of the other).
    """
    existing = model.enums.get(enum.fullname)
    if existing is not None:
        return existing
    if not enum.prefix:
        return None
    claimants = sort_once(
        {const.claimed_by for const in consumed if const.claimed_by},
        source="find_merge_target.claimants",
    )
    for key in claimants:
        candidate = model.enums.get(key)
        if candidate is None or candidate.class_name != enum.class_name:
            continue
        if not candidate.prefix:
            continue
        if is_word_prefix(candidate.prefix, enum.prefix) or is_word_prefix(
            enum.prefix, candidate.prefix
        ):
            return candidate
    return None


def merge_enum(
    model: ApiModel,
    enum: InferredEnum,
    consumed: Sequence[Const] = (),
) -> InferredEnum:
    target = find_merge_target(model, enum, consumed)
    if target is None:
        model.register_enum(enum)
        for const in consumed:
            model.claim(const, enum)
        return enum

    # Hint-named groups carry no prefix to reconcile.
    if target.prefix != enum.prefix and target.prefix and enum.prefix:
        if is_word_prefix(enum.prefix, target.prefix):
            _reprefix_members(model, target, target.prefix[len(enum.prefix):])
            if target.fullname != enum.fullname:
                model.rename_enum(target, enum.name, enum.prefix)
            else:
                target.prefix = enum.prefix
        elif is_word_prefix(target.prefix, enum.prefix):
            _reprefix_members(model, enum, enum.prefix[len(target.prefix):])
        else:
            model.warn(
                "prefix_conflict",
                target.fullname,
                f"prefixes {join_words(target.prefix) or '<none>'} and "
                f"{join_words(enum.prefix) or '<none>'} are incompatible; "
                "keeping the first",
            )

    for value in sort_once(enum.members, source="merge_enum.members"):
        incoming = enum.members[value]
        current = target.members.get(value)
        if current is None:
            target.members[value] = EnumMember(const=incoming.const, name=incoming.name)
        elif current.name != incoming.name:
            model.warn(
                "member_conflict",
                target.fullname,
                f"value {value} named {current.name} and {incoming.name}; "
                f"keeping {current.name}",
            )
    for const in consumed:
        model.claim(const, target)
    return target


def _reprefix_members(
    model: ApiModel,
    enum: InferredEnum,
    extra: tuple[str, ...],
) -> None:
    """Prepend the words a shorter prefix no longer subsumes."""
    if not extra:
        return
    lead = join_words(extra) + WORD_SEPARATOR
    for member in enum.members.values():
        const = model.consts.get(member.const)
        short_name = const.name if const is not None else member.const.rpartition(".")[2]
        # Members already carrying their full constant name stay verbatim.
        if member.name == short_name:
            continue
        member.name = lead + member.name
