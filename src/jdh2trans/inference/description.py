"""Find the constants a parameter, return value or field accepts by reading its prose."""

from __future__ import annotations

import re
from dataclasses import dataclass

from jdh2trans.inference.clustering import create_enum_from_constants
from jdh2trans.model import ApiModel, Const, InferredEnum
from jdh2trans.naming import WORD_SEPARATOR, accessor_hint, to_const_case
from jdh2trans.order_contract import sort_once

_TOKEN_SPLIT = re.compile(r"[\s,*]+")
_CONST_TOKEN = re.compile(r"(?:[A-Za-z_]\w*\.)*[A-Z][A-Z0-9_]*")


@dataclass(frozen=True)
class DescriptionContext:
    class_name: str
    method_name: str | None = None
    site: str = ""


def tokenize(model: ApiModel, text: str) -> list[str]:
    corrected = model.config.correct_prose(text)
    tokens: list[str] = []
    for raw in _TOKEN_SPLIT.split(corrected):
        token = raw.rstrip(".")
        if token:
            tokens.append(token)
    return tokens


def infer_from_description(
    model: ApiModel,
    text: str,
    context: DescriptionContext,
) -> InferredEnum | None:
    config = model.config
    site = context.site or context.class_name
    tokens = tokenize(model, text)

    hint: str | None = None
    if len(tokens) >= 2 and tokens[1] == "-":
        hint = to_const_case(tokens[0], config.param_prefix_cleanup) or None
        # Name and dash only; the first description word may be a constant.
        tokens = tokens[2:]
    if context.method_name is not None:
        accessor = accessor_hint(context.method_name, config)
        if accessor:
            hint = to_const_case(accessor)

    matches = _match_tokens(model, tokens)
    cluster = _choose_cluster(model, matches, context.class_name, site) if matches else None
    if cluster:
        enum = create_enum_from_constants(model, cluster, hint=hint, site=site)
        if enum is not None:
            return enum

    if hint:
        hinted = model.consts_with_prefix(f"{context.class_name}.{hint}{WORD_SEPARATOR}")
        if hinted:
            return create_enum_from_constants(model, hinted, hint=hint, site=site)
    return None


def _match_tokens(model: ApiModel, tokens: list[str]) -> dict[str, list[Const]]:
    matches: dict[str, list[Const]] = {}
    for token in sort_once(set(tokens), source="_match_tokens.tokens"):
        if not _CONST_TOKEN.fullmatch(token):
            continue
        short_name = token.rpartition(".")[2]
        candidates = model.consts_named(short_name)
        if "." in token:
            candidates = [
                const for const in candidates if const.fullname.endswith("." + token)
            ]
        if candidates:
            matches[token] = candidates
    return matches


def _choose_cluster(
    model: ApiModel,
    matches: dict[str, list[Const]],
    class_name: str,
    site: str,
) -> list[Const] | None:
    distinct = set(matches)
    by_class: dict[str, dict[str, list[Const]]] = {}
    for token, consts in matches.items():
        for const in consts:
            by_class.setdefault(const.class_name, {}).setdefault(token, []).append(const)

    current = by_class.get(class_name)
    if current is not None and set(current) == distinct:
        return _flatten(current)

    unique = all(len(consts) == 1 for consts in matches.values())
    if len(by_class) == 1 and unique:
        return _flatten(next(iter(by_class.values())))

    for owner in sort_once(by_class, source="_choose_cluster.classes"):
        if set(by_class[owner]) == distinct:
            return _flatten(by_class[owner])

    model.warn(
        "ambiguous_description",
        site,
        "constants "
        + ", ".join(sort_once(distinct, source="_choose_cluster.warning"))
        + " resolve across classes "
        + ", ".join(sort_once(by_class, source="_choose_cluster.warning_classes")),
    )
    return None


def _flatten(by_token: dict[str, list[Const]]) -> list[Const]:
    seen: dict[str, Const] = {}
    for token in sort_once(by_token, source="_flatten.tokens"):
        for const in by_token[token]:
            seen.setdefault(const.fullname, const)
    return list(seen.values())
