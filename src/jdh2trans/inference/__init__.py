"""Enum inference engine."""

from jdh2trans.inference.clustering import create_enum_from_constants
from jdh2trans.inference.description import (
    DescriptionContext,
    infer_from_description,
    tokenize,
)
from jdh2trans.inference.merge import find_merge_target, merge_enum
from jdh2trans.inference.resolution import (
    ResolvedType,
    TypeSite,
    locate_block,
    qualify_and_infer_type,
)
from jdh2trans.inference.similarity import search_enum_by_name, search_key

__all__ = [
    "DescriptionContext",
    "ResolvedType",
    "TypeSite",
    "create_enum_from_constants",
    "find_merge_target",
    "infer_from_description",
    "locate_block",
    "merge_enum",
    "qualify_and_infer_type",
    "search_enum_by_name",
    "search_key",
    "tokenize",
]
