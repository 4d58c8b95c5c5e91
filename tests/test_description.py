from __future__ import annotations

import re

from jdh2trans.config import InferenceConfig
from jdh2trans.inference import DescriptionContext, infer_from_description, tokenize
from tests.model_helpers import PEN_CONSTANTS, make_model


def test_tokenize_splits_on_whitespace_commas_and_asterisks() -> None:
    model = make_model({})
    text = "type - one of PEN_TYPE_FINGER,PEN_TYPE_STYLUS * or  PEN_TYPE_ERASER."
    assert tokenize(model, text) == [
        "type",
        "-",
        "one",
        "of",
        "PEN_TYPE_FINGER",
        "PEN_TYPE_STYLUS",
        "or",
        "PEN_TYPE_ERASER",
    ]


def test_tokenize_applies_prose_corrections_in_order() -> None:
    config = InferenceConfig(
        corrections=(
            (re.compile(r"PEN_TIPE_"), "PEN_TYPE_"),
            (re.compile(r"FINGR\b"), "FINGER"),
        )
    )
    model = make_model({}, config=config)
    assert tokenize(model, "use PEN_TIPE_FINGR") == ["use", "PEN_TYPE_FINGER"]


def test_constants_listed_in_prose_become_an_enum() -> None:
    model = make_model(PEN_CONSTANTS)
    context = DescriptionContext(class_name="com.x.Pen", method_name="draw")

    enum = infer_from_description(
        model,
        "type - one of PEN_TYPE_FINGER, PEN_TYPE_STYLUS or PEN_TYPE_ERASER.",
        context,
    )

    assert enum is not None
    assert enum.fullname == "com.x.Pen.PEN_TYPE"
    assert enum.member_pairs() == [(0, "FINGER"), (1, "STYLUS"), (2, "ERASER")]


def test_dotted_references_match_on_the_owning_class() -> None:
    model = make_model({**PEN_CONSTANTS, "com.x.Brush.PEN_TYPE_FINGER": 5})
    context = DescriptionContext(class_name="com.x.Canvas")

    enum = infer_from_description(model, "either Pen.PEN_TYPE_FINGER or Pen.PEN_TYPE_STYLUS", context)

    assert enum is not None
    assert enum.fullname == "com.x.Pen.PEN_TYPE"


def test_current_class_matches_take_priority() -> None:
    model = make_model({**PEN_CONSTANTS, "com.x.Brush.PEN_TYPE_FINGER": 5})
    context = DescriptionContext(class_name="com.x.Brush")

    enum = infer_from_description(model, "PEN_TYPE_FINGER", context)

    assert enum is not None
    assert enum.class_name == "com.x.Brush"
    assert enum.fullname == "com.x.Brush.PEN"
    assert enum.member_pairs() == [(5, "TYPE_FINGER")]


def test_single_foreign_class_with_unique_matches_is_used() -> None:
    model = make_model(PEN_CONSTANTS)
    context = DescriptionContext(class_name="com.x.Canvas")

    enum = infer_from_description(model, "PEN_TYPE_FINGER or PEN_TYPE_STYLUS", context)

    assert enum is not None
    assert enum.fullname == "com.x.Pen.PEN_TYPE"


def test_single_class_covering_every_token_wins_over_partial_ones() -> None:
    model = make_model(
        {
            **PEN_CONSTANTS,
            "com.x.Brush.PEN_TYPE_FINGER": 5,
        }
    )
    context = DescriptionContext(class_name="com.x.Canvas")

    enum = infer_from_description(model, "PEN_TYPE_FINGER or PEN_TYPE_STYLUS", context)

    assert enum is not None
    assert enum.class_name == "com.x.Pen"
    assert model.diagnostics == []


def test_matches_split_across_classes_are_ambiguous() -> None:
    model = make_model({"com.x.A.MODE_ON": 1, "com.x.B.MODE_OFF": 0})
    context = DescriptionContext(class_name="com.x.C", site="com.x.C.toggle")

    enum = infer_from_description(model, "MODE_ON or MODE_OFF", context)

    assert enum is None
    assert [item.kind for item in model.diagnostics] == ["ambiguous_description"]
    assert model.diagnostics[0].site == "com.x.C.toggle"


def test_ambiguity_falls_through_to_the_name_hint() -> None:
    model = make_model(
        {
            "com.x.A.MODE_ON": 1,
            "com.x.B.MODE_OFF": 0,
            "com.x.C.MODE_FAST": 0,
            "com.x.C.MODE_SLOW": 1,
        }
    )
    context = DescriptionContext(class_name="com.x.C")

    enum = infer_from_description(model, "mode - MODE_ON or MODE_OFF", context)

    assert enum is not None
    assert enum.fullname == "com.x.C.MODE"
    assert [item.kind for item in model.diagnostics] == ["ambiguous_description"]


def test_name_hint_finds_constants_when_prose_names_none() -> None:
    model = make_model({"com.x.Pen.MODE_FAST": 0, "com.x.Pen.MODE_SLOW": 1})
    context = DescriptionContext(class_name="com.x.Pen", method_name="draw")

    enum = infer_from_description(model, "mode - the drawing mode", context)

    assert enum is not None
    assert enum.fullname == "com.x.Pen.MODE"
    assert enum.member_pairs() == [(0, "FAST"), (1, "SLOW")]


def test_parameter_cleanup_applies_to_the_name_hint() -> None:
    config = InferenceConfig(param_prefix_cleanup=re.compile(r"^m(?=[A-Z])"))
    model = make_model({"com.x.Pen.MODE_FAST": 0, "com.x.Pen.MODE_SLOW": 1}, config=config)
    context = DescriptionContext(class_name="com.x.Pen")

    enum = infer_from_description(model, "mMode - the drawing mode", context)

    assert enum is not None
    assert enum.fullname == "com.x.Pen.MODE"


def test_accessor_name_overrides_the_positional_hint() -> None:
    model = make_model(
        {
            "com.x.Pen.STROKE_MODE_THIN": 0,
            "com.x.Pen.STROKE_MODE_BOLD": 1,
            "com.x.Pen.VALUE_X": 0,
            "com.x.Pen.VALUE_Y": 1,
        }
    )
    context = DescriptionContext(class_name="com.x.Pen", method_name="setStrokeMode")

    enum = infer_from_description(model, "value - the stroke", context)

    assert enum is not None
    assert enum.fullname == "com.x.Pen.STROKE_MODE"


def test_prose_without_constants_or_hint_yields_nothing() -> None:
    model = make_model(PEN_CONSTANTS)
    context = DescriptionContext(class_name="com.x.Pen", method_name="draw")

    assert infer_from_description(model, "the width in pixels", context) is None
    assert model.enums == {}
    assert model.diagnostics == []


def test_first_description_word_after_the_name_hint_is_kept() -> None:
    model = make_model(PEN_CONSTANTS)
    context = DescriptionContext(class_name="com.x.Pen", method_name="draw")

    enum = infer_from_description(model, "tool - PEN_TYPE_FINGER", context)

    assert enum is not None
    assert enum.fullname == "com.x.Pen.PEN_TYPE"
    assert enum.member_pairs() == [(0, "FINGER"), (1, "STYLUS"), (2, "ERASER")]
