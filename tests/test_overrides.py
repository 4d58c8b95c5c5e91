from __future__ import annotations

import pytest

from jdh2trans.config import EnumRule, OverrideTarget
from jdh2trans.exceptions import SignatureCollisionError, UnknownMethodError
from jdh2trans.overrides import (
    apply_enum_rules,
    collect_values_by_prefix,
    create_enum,
    retype_parameter,
    retype_return,
)
from tests.model_helpers import PEN_CONSTANTS, add_method, make_model


def _pen_model():
    model = make_model({**PEN_CONSTANTS, "com.x.Pen.LABEL": "ink"})
    add_method(model, "com.x.Pen", "setTool", [("int", "tool"), ("int", "size")])
    add_method(model, "com.x.Pen", "getTool", return_type="int")
    add_method(model, "com.x.Pen", "Pen", [("int", "tool")], constructor=True)
    return model


def test_collect_values_by_prefix_returns_sorted_integer_constants() -> None:
    model = _pen_model()

    consts = collect_values_by_prefix(model, "com.x.Pen.PEN_TYPE_")

    assert [const.name for const in consts] == [
        "PEN_TYPE_ERASER",
        "PEN_TYPE_FINGER",
        "PEN_TYPE_STYLUS",
    ]
    assert collect_values_by_prefix(model, "com.x.Pen.LAB") == []


def test_create_enum_with_explicit_name() -> None:
    model = _pen_model()

    enum = create_enum(model, collect_values_by_prefix(model, "com.x.Pen.PEN_"), "tool")

    assert enum is not None
    assert enum.fullname == "com.x.Pen.TOOL"
    assert enum.member_pairs() == [(0, "FINGER"), (1, "STYLUS"), (2, "ERASER")]


def test_retype_parameter_by_signature_updates_all_indexes() -> None:
    model = _pen_model()
    enum = create_enum(model, collect_values_by_prefix(model, "com.x.Pen.PEN_TYPE_"))
    assert enum is not None

    method = retype_parameter(model, "com.x.Pen.setTool(int,int)", 1, enum)

    expected = "com.x.Pen.setTool(com.x.Pen.PEN_TYPE,int)"
    assert method.signature == expected
    assert model.methods[expected] is method
    assert "com.x.Pen.setTool(int,int)" not in model.methods
    assert model.classes["com.x.Pen"].methods[expected] is method
    assert "com.x.Pen.setTool(int,int)" not in model.classes["com.x.Pen"].methods
    assert method.params[0].raw_type == "int"


def test_retype_parameter_by_reference_on_constructor() -> None:
    model = _pen_model()
    enum = create_enum(model, collect_values_by_prefix(model, "com.x.Pen.PEN_TYPE_"))
    assert enum is not None
    ctor = model.methods["com.x.Pen.constructor(int)"]

    retype_parameter(model, ctor, 1, enum)

    assert list(model.classes["com.x.Pen"].constructors) == [
        "com.x.Pen.constructor(com.x.Pen.PEN_TYPE)"
    ]


def test_retype_return() -> None:
    model = _pen_model()
    enum = create_enum(model, collect_values_by_prefix(model, "com.x.Pen.PEN_TYPE_"))
    assert enum is not None

    method = retype_return(model, "com.x.Pen.getTool()", enum)

    assert method.return_type == "com.x.Pen.PEN_TYPE"
    assert method.return_enum == "com.x.Pen.PEN_TYPE"
    assert method.signature == "com.x.Pen.getTool()"


def test_unknown_targets_raise() -> None:
    model = _pen_model()
    enum = create_enum(model, collect_values_by_prefix(model, "com.x.Pen.PEN_TYPE_"))
    assert enum is not None

    with pytest.raises(UnknownMethodError):
        retype_parameter(model, "com.x.Pen.missing(int)", 1, enum)
    with pytest.raises(UnknownMethodError) as excinfo:
        retype_parameter(model, "com.x.Pen.setTool(int,int)", 3, enum)
    assert excinfo.value.position == 3
    with pytest.raises(UnknownMethodError):
        retype_return(model, "com.x.Pen.constructor(int)", enum)


def test_retype_collision_is_reported_not_applied() -> None:
    model = _pen_model()
    enum = create_enum(model, collect_values_by_prefix(model, "com.x.Pen.PEN_TYPE_"))
    assert enum is not None
    add_method(model, "com.x.Pen", "setTool", [("com.x.Pen.PEN_TYPE", "tool"), ("int", "size")])

    with pytest.raises(SignatureCollisionError) as excinfo:
        retype_parameter(model, "com.x.Pen.setTool(int,int)", 1, enum)

    assert excinfo.value.signature == "com.x.Pen.setTool(int,int)"
    assert "com.x.Pen.setTool(int,int)" in model.methods
    assert model.methods["com.x.Pen.setTool(int,int)"].params[0].enum is None
    assert [item.kind for item in model.diagnostics] == ["signature_collision"]


def test_apply_enum_rules_creates_and_retypes() -> None:
    model = _pen_model()
    rules = [
        EnumRule(
            prefix="com.x.Pen.PEN_TYPE_",
            name="tool",
            targets=(
                OverrideTarget(signature="com.x.Pen.setTool(int,int)", position=1),
                OverrideTarget(signature="com.x.Pen.getTool()", position=0),
            ),
        ),
        EnumRule(prefix="com.x.Pen.NOTHING_"),
    ]

    created = apply_enum_rules(model, rules)

    assert [enum.fullname for enum in created] == ["com.x.Pen.TOOL"]
    assert "com.x.Pen.setTool(com.x.Pen.TOOL,int)" in model.methods
    assert model.methods["com.x.Pen.getTool()"].return_enum == "com.x.Pen.TOOL"
    assert [(item.kind, item.site) for item in model.diagnostics] == [
        ("no_discoverable_name", "com.x.Pen.NOTHING_")
    ]


def test_apply_enum_rules_retypes_several_positions_at_once() -> None:
    model = _pen_model()
    rules = [
        EnumRule(
            prefix="com.x.Pen.PEN_TYPE_",
            targets=(
                OverrideTarget(signature="com.x.Pen.setTool(int,int)", position=2),
                OverrideTarget(signature="com.x.Pen.setTool(int,int)", position=1),
            ),
        )
    ]

    apply_enum_rules(model, rules)

    assert "com.x.Pen.setTool(com.x.Pen.PEN_TYPE,com.x.Pen.PEN_TYPE)" in model.methods


def test_apply_enum_rules_rejects_unknown_targets() -> None:
    model = _pen_model()
    rules = [
        EnumRule(
            prefix="com.x.Pen.PEN_TYPE_",
            targets=(OverrideTarget(signature="com.x.Pen.setTool(int,int)", position=5),),
        )
    ]

    with pytest.raises(UnknownMethodError):
        apply_enum_rules(model, rules)


def test_apply_enum_rules_rejects_constructor_return_target() -> None:
    model = _pen_model()
    rules = [
        EnumRule(
            prefix="com.x.Pen.PEN_TYPE_",
            targets=(OverrideTarget(signature="com.x.Pen.constructor(int)", position=0),),
        )
    ]

    with pytest.raises(UnknownMethodError) as excinfo:
        apply_enum_rules(model, rules)

    assert excinfo.value.position == 0
    ctor = model.methods["com.x.Pen.constructor(int)"]
    assert ctor.return_enum is None
    assert ctor.return_type == "void"
