from __future__ import annotations

from jdh2trans.config import InferenceConfig
from jdh2trans.inference import create_enum_from_constants
from tests.model_helpers import PEN_CONSTANTS, make_model


def _kinds(model) -> list[str]:
    return [item.kind for item in model.diagnostics]


def test_pen_type_constants_cluster_into_one_enum() -> None:
    model = make_model(PEN_CONSTANTS)

    enum = create_enum_from_constants(model, model.consts_in_class("com.x.Pen"))

    assert enum is not None
    assert enum.fullname == "com.x.Pen.PEN_TYPE"
    assert enum.prefix == ("PEN", "TYPE")
    assert enum.member_pairs() == [(0, "FINGER"), (1, "STYLUS"), (2, "ERASER")]
    assert model.enums == {"com.x.Pen.PEN_TYPE": enum}
    assert "com.x.Pen.PEN_TYPE" in model.classes["com.x.Pen"].enums
    assert {const.claimed_by for const in model.consts.values()} == {enum.fullname}
    assert model.diagnostics == []


def test_single_constant_yields_degenerate_first_word_enum() -> None:
    model = make_model({"com.x.Widget.MODE_DEFAULT": 0})

    enum = create_enum_from_constants(model, model.consts.values())

    assert enum is not None
    assert enum.fullname == "com.x.Widget.MODE"
    assert enum.member_pairs() == [(0, "DEFAULT")]


def test_recall_adds_constants_missing_from_the_input() -> None:
    model = make_model(PEN_CONSTANTS)
    mentioned = [model.consts["com.x.Pen.PEN_TYPE_FINGER"]]

    enum = create_enum_from_constants(model, mentioned)

    assert enum is not None
    # The lone constant first yields PEN; recall widens the set to all three.
    assert enum.name == "PEN_TYPE"
    assert [name for _, name in enum.member_pairs()] == ["FINGER", "STYLUS", "ERASER"]


def test_recall_stays_inside_the_owning_class() -> None:
    model = make_model({**PEN_CONSTANTS, "com.x.Brush.PEN_TYPE_WIDE": 7})

    enum = create_enum_from_constants(model, model.consts_in_class("com.x.Pen"))

    assert enum is not None
    assert 7 not in enum.members
    assert model.consts["com.x.Brush.PEN_TYPE_WIDE"].claimed_by is None


def test_hint_names_prefixless_cluster_with_full_member_names() -> None:
    model = make_model({"com.x.Pen.ALPHA": 0, "com.x.Pen.BETA": 1})

    enum = create_enum_from_constants(model, model.consts.values(), hint="blendMode")

    assert enum is not None
    assert enum.fullname == "com.x.Pen.BLEND_MODE"
    assert enum.prefix == ()
    assert enum.member_pairs() == [(0, "ALPHA"), (1, "BETA")]


def test_prefixless_cluster_without_hint_is_reported_and_skipped() -> None:
    model = make_model({"com.x.Pen.ALPHA": 0, "com.x.Pen.BETA": 1})

    enum = create_enum_from_constants(model, model.consts.values(), site="com.x.Pen.draw")

    assert enum is None
    assert model.enums == {}
    assert _kinds(model) == ["no_discoverable_name"]
    assert model.diagnostics[0].site == "com.x.Pen.draw"
    assert all(const.claimed_by is None for const in model.consts.values())


def test_explicit_name_wins_over_prefix() -> None:
    model = make_model(PEN_CONSTANTS)

    enum = create_enum_from_constants(model, model.consts.values(), name="toolKind")

    assert enum is not None
    assert enum.fullname == "com.x.Pen.TOOL_KIND"
    assert enum.member_pairs() == [(0, "FINGER"), (1, "STYLUS"), (2, "ERASER")]


def test_duplicate_values_keep_the_first_name() -> None:
    model = make_model({"com.x.Pen.MODE_A": 0, "com.x.Pen.MODE_B": 0, "com.x.Pen.MODE_C": 1})

    enum = create_enum_from_constants(model, model.consts.values())

    assert enum is not None
    assert enum.member_pairs() == [(0, "A"), (1, "C")]
    assert _kinds(model) == ["duplicate_value"]
    assert model.diagnostics[0].site == "com.x.Pen.MODE_B"


def test_non_integer_constants_are_ignored() -> None:
    model = make_model({"com.x.Pen.NAME_DEFAULT": "pen"})

    assert create_enum_from_constants(model, model.consts.values()) is None
    assert model.diagnostics == []


def test_ignored_constant_keeps_its_full_name() -> None:
    model = make_model(
        {**PEN_CONSTANTS, "com.x.Pen.UNKNOWN": -1},
        config=InferenceConfig(ignore_values=frozenset({"UNKNOWN"})),
    )

    enum = create_enum_from_constants(model, model.consts.values())

    assert enum is not None
    assert enum.name == "PEN_TYPE"
    assert enum.members[-1].name == "UNKNOWN"


def test_constants_from_other_classes_are_dropped_with_a_warning() -> None:
    model = make_model({**PEN_CONSTANTS, "com.x.Zeta.PEN_TYPE_GHOST": 9})

    enum = create_enum_from_constants(model, model.consts.values(), site="mixed")

    assert enum is not None
    assert enum.class_name == "com.x.Pen"
    assert 9 not in enum.members
    assert _kinds(model) == ["ambiguous_description"]
