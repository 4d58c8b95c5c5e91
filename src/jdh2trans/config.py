from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date, datetime, time
from pathlib import Path
from typing import TypeAlias
import tomllib

from jdh2trans.exceptions import ConfigError

DEFAULT_CONFIG_NAME = "jdh2trans.toml"
DEFAULT_ACCESSOR_PREFIX = r"^(?:get|set|is)(?=[A-Z])"

TomlScalar: TypeAlias = str | int | float | bool | None | date | datetime | time
TomlValue: TypeAlias = TomlScalar | list["TomlValue"] | dict[str, "TomlValue"]
TomlTable: TypeAlias = dict[str, TomlValue]


@dataclass(frozen=True)
class InferenceConfig:
    """Process-wide inference knobs, fixed before parsing starts."""

    ignore_values: frozenset[str] = frozenset()
    only_int_constants: bool = True
    param_prefix_cleanup: re.Pattern[str] | None = None
    method_prefix_cleanup: re.Pattern[str] | None = None
    accessor_prefix: re.Pattern[str] = re.compile(DEFAULT_ACCESSOR_PREFIX)
    param_exclude: re.Pattern[str] | None = None
    search_subpackages: bool = False
    corrections: tuple[tuple[re.Pattern[str], str], ...] = ()

    def correct_prose(self, text: str) -> str:
        for pattern, replacement in self.corrections:
            text = pattern.sub(replacement, text)
        return text


@dataclass(frozen=True)
class OverrideTarget:
    signature: str
    # 0 addresses the return value; parameters are 1-based.
    position: int


@dataclass(frozen=True)
class EnumRule:
    prefix: str
    name: str | None = None
    targets: tuple[OverrideTarget, ...] = field(default_factory=tuple)


def _load_toml(path: Path) -> TomlTable:
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return {}
    except OSError:
        return {}
    try:
        data = tomllib.loads(raw)
    except tomllib.TOMLDecodeError:
        return {}
    return data if isinstance(data, dict) else {}


def load_config(root: Path | None = None, config_path: Path | None = None) -> TomlTable:
    if config_path is None:
        base = root if root is not None else Path.cwd()
        config_path = base / DEFAULT_CONFIG_NAME
    return _load_toml(config_path)


def inference_defaults(
    root: Path | None = None, config_path: Path | None = None
) -> TomlTable:
    data = load_config(root=root, config_path=config_path)
    section = data.get("inference", {})
    return section if isinstance(section, dict) else {}


def enum_rule_defaults(
    root: Path | None = None, config_path: Path | None = None
) -> list[TomlTable]:
    data = load_config(root=root, config_path=config_path)
    section = data.get("enums", [])
    if not isinstance(section, list):
        return []
    return [entry for entry in section if isinstance(entry, dict)]


def _normalize_name_list(value: TomlValue) -> list[str]:
    items: list[str] = []
    if value is None:
        return items
    if isinstance(value, str):
        items = [part.strip() for part in value.split(",") if part.strip()]
    elif isinstance(value, (list, tuple, set)):
        for item in value:
            if isinstance(item, str):
                items.extend([part.strip() for part in item.split(",") if part.strip()])
    return [item for item in items if item]


def _as_bool(value: TomlValue) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return False


def _compile(value: TomlValue, *, key: str) -> re.Pattern[str] | None:
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ConfigError(f"{key} must be a regular expression string", key=key)
    try:
        return re.compile(value)
    except re.error as exc:
        raise ConfigError(f"{key}: invalid regular expression: {exc}", key=key) from exc


def _corrections(value: TomlValue) -> tuple[tuple[re.Pattern[str], str], ...]:
    if not isinstance(value, list):
        return ()
    compiled: list[tuple[re.Pattern[str], str]] = []
    for index, entry in enumerate(value):
        if not isinstance(entry, dict):
            raise ConfigError(
                f"corrections[{index}] must be a table", key="corrections"
            )
        pattern = _compile(entry.get("pattern"), key=f"corrections[{index}].pattern")
        replacement = entry.get("replacement", "")
        if pattern is None or not isinstance(replacement, str):
            raise ConfigError(
                f"corrections[{index}] needs a pattern and a string replacement",
                key="corrections",
            )
        compiled.append((pattern, replacement))
    return tuple(compiled)


def inference_config_from_section(section: TomlTable | None) -> InferenceConfig:
    if section is None or not isinstance(section, dict):
        return InferenceConfig()
    accessor = _compile(section.get("accessor_prefix"), key="accessor_prefix")
    only_int = section.get("only_int_constants")
    return InferenceConfig(
        ignore_values=frozenset(_normalize_name_list(section.get("ignore_values"))),
        only_int_constants=True if only_int is None else _as_bool(only_int),
        param_prefix_cleanup=_compile(
            section.get("param_prefix_cleanup"), key="param_prefix_cleanup"
        ),
        method_prefix_cleanup=_compile(
            section.get("method_prefix_cleanup"), key="method_prefix_cleanup"
        ),
        accessor_prefix=accessor or re.compile(DEFAULT_ACCESSOR_PREFIX),
        param_exclude=_compile(section.get("param_exclude"), key="param_exclude"),
        search_subpackages=_as_bool(section.get("search_subpackages")),
        corrections=_corrections(section.get("corrections")),
    )


def enum_rules_from_entries(entries: list[TomlTable]) -> list[EnumRule]:
    rules: list[EnumRule] = []
    for index, entry in enumerate(entries):
        prefix = entry.get("prefix")
        if not isinstance(prefix, str) or not prefix:
            raise ConfigError(f"enums[{index}].prefix is required", key="enums")
        name = entry.get("name")
        if name is not None and not isinstance(name, str):
            raise ConfigError(f"enums[{index}].name must be a string", key="enums")
        targets: list[OverrideTarget] = []
        raw_targets = entry.get("targets", [])
        if not isinstance(raw_targets, list):
            raise ConfigError(f"enums[{index}].targets must be a list", key="enums")
        for target in raw_targets:
            if not isinstance(target, dict):
                continue
            signature = target.get("signature")
            position = target.get("position", 1)
            if not isinstance(signature, str) or not isinstance(position, int):
                raise ConfigError(
                    f"enums[{index}] target needs signature and integer position",
                    key="enums",
                )
            targets.append(OverrideTarget(signature=signature, position=position))
        rules.append(EnumRule(prefix=prefix, name=name, targets=tuple(targets)))
    return rules


def merge_payload(payload: TomlTable, defaults: TomlTable) -> TomlTable:
    merged = dict(defaults)
    for key, value in payload.items():
        if value is None:
            continue
        merged[key] = value
    return merged
