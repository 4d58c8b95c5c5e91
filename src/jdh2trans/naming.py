"""Identifier and type-text helpers used throughout inference.

Constant names are treated as sequences of underscore-separated words. A
name's final word never belongs to a shared prefix, so every member keeps a
non-empty suffix once the prefix is stripped.
"""

from __future__ import annotations

import re
from collections import deque
from typing import AbstractSet, Iterable

from jdh2trans.config import InferenceConfig
from jdh2trans.order_contract import sort_once

WORD_SEPARATOR = "_"

# Bare java.lang names resolve there once cross-reference hints run out.
_JAVA_LANG_TYPES = frozenset(
    {
        "Boolean",
        "Byte",
        "CharSequence",
        "Character",
        "Double",
        "Float",
        "Integer",
        "Long",
        "Object",
        "Short",
        "String",
        "Void",
    }
)

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")
_TYPE_TOKEN = re.compile(r"(?<![\w.])([A-Z]\w*(?:\.[A-Z]\w*)*)")
_INT_TOKEN = re.compile(r"(?<![\w.])(?:int|(?:java\.lang\.)?Integer)(?![\w])")
_SCALAR_INT = re.compile(r"(?:int|(?:java\.lang\.)?Integer)(?:\[\])*(?:\.\.\.)?")
_BOXED_ARG = re.compile(r"<[^>]*(?<![\w.])(?:java\.lang\.)?Integer(?![\w])")
_ANNOTATION = re.compile(r"@\w+(?:\([^)]*\))?\s*")


def words(name: str) -> list[str]:
    return [word for word in name.split(WORD_SEPARATOR) if word]


def join_words(parts: Iterable[str]) -> str:
    return WORD_SEPARATOR.join(parts)


def common_prefix(
    names: Iterable[str],
    ignore: AbstractSet[str] = frozenset(),
) -> tuple[str, ...]:
    """Longest shared leading word sequence, final words excluded.

    An empty tuple means the set is not cluster-worthy. A single remaining
    name yields its first word so one-member groups still get a name.
    """
    candidates = sort_once(
        {name for name in names if name and name not in ignore},
        source="common_prefix.candidates",
    )
    if not candidates:
        return ()
    if len(candidates) == 1:
        first = words(candidates[0])
        return (first[0],) if first else ()
    word_lists = [words(name)[:-1] for name in candidates]
    shared: list[str] = []
    for column in zip(*word_lists):
        if any(word != column[0] for word in column):
            break
        shared.append(column[0])
    return tuple(shared)


def strip_prefix(
    name: str,
    prefix: tuple[str, ...],
    ignore: AbstractSet[str] = frozenset(),
) -> str:
    if name in ignore or not prefix:
        return name
    lead = join_words(prefix) + WORD_SEPARATOR
    if name.startswith(lead) and len(name) > len(lead):
        return name[len(lead):]
    return name


def is_word_prefix(shorter: tuple[str, ...], longer: tuple[str, ...]) -> bool:
    return len(shorter) <= len(longer) and longer[: len(shorter)] == shorter


def to_const_case(identifier: str, cleanup: re.Pattern[str] | None = None) -> str:
    """``featureId`` -> ``FEATURE_ID``; ``cleanup`` matches are removed first."""
    if cleanup is not None:
        identifier = cleanup.sub("", identifier)
    return _CAMEL_BOUNDARY.sub(WORD_SEPARATOR, identifier).upper()


def qualify_type(raw_type: str, package: str, hints: deque[str]) -> str:
    """Prefix each capitalized type token with a package.

    Tokens are visited left to right and each consumes the next hint, so the
    same ``hints`` deque must be shared across one prototype's return type
    and parameters. Single-letter tokens are type variables and are left
    alone; dotted lowercase names are already qualified.
    """

    def _qualify(match: re.Match[str]) -> str:
        token = match.group(1)
        if len(token) == 1:
            return token
        if hints:
            return f"{hints.popleft()}.{token}"
        if token in _JAVA_LANG_TYPES:
            return f"java.lang.{token}"
        return f"{package}.{token}" if package else token

    return _TYPE_TOKEN.sub(_qualify, raw_type.strip())


def is_integer_shaped(type_text: str) -> bool:
    text = type_text.strip()
    return bool(_SCALAR_INT.fullmatch(text) or _BOXED_ARG.search(text))


def substitute_integer(type_text: str, enum_fullname: str) -> str:
    return _INT_TOKEN.sub(enum_fullname, type_text)


def split_parameters(text: str) -> list[tuple[str, str]]:
    """Split ``int a, Map<K, V> b`` into ``[("int", "a"), ("Map<K, V>", "b")]``."""
    pieces: list[str] = []
    depth = 0
    current: list[str] = []
    for char in text:
        if char == "<":
            depth += 1
        elif char == ">":
            depth -= 1
        if char == "," and depth == 0:
            pieces.append("".join(current))
            current = []
            continue
        current.append(char)
    pieces.append("".join(current))

    params: list[tuple[str, str]] = []
    for piece in pieces:
        cleaned = _ANNOTATION.sub("", piece).strip()
        if cleaned.startswith("final "):
            cleaned = cleaned[len("final "):].strip()
        if not cleaned:
            continue
        type_text, _, name = cleaned.rpartition(" ")
        if not type_text:
            type_text, name = name, ""
        params.append((type_text.strip(), name.strip()))
    return params


def accessor_hint(method_name: str, config: InferenceConfig) -> str | None:
    """Naming hint for getters/setters: the method name minus its prefix."""
    match = config.accessor_prefix.match(method_name)
    if match is None:
        return None
    rest = method_name[match.end():]
    if config.method_prefix_cleanup is not None:
        rest = config.method_prefix_cleanup.sub("", rest)
    return rest or None
