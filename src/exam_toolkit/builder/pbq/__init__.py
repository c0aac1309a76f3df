"""
Module: builder.pbq

Purpose:
    Performance-based question templates (ORDER and MATCH) and the
    per-variant template library.

Key Functions:
    - load_pbq_library(): Library for an exam variant from its plugin
    - parse_template(): Validate one raw template
    - instantiate_template(): Template -> Question

Key Classes:
    - PbqLibrary, OrderTemplate, MatchTemplate, MatchPair
    - TemplateValidationError
"""

from .library import PbqLibrary, load_pbq_library
from .templates import (
    DEFAULT_MATCH_EXPLANATION,
    DEFAULT_ORDER_EXPLANATION,
    PAIR_SEPARATOR,
    MatchPair,
    MatchTemplate,
    OrderTemplate,
    PbqTemplate,
    TemplateValidationError,
    encode_pair,
    instantiate_template,
    parse_template,
)

__all__ = [
    "PbqLibrary",
    "load_pbq_library",
    "DEFAULT_MATCH_EXPLANATION",
    "DEFAULT_ORDER_EXPLANATION",
    "PAIR_SEPARATOR",
    "MatchPair",
    "MatchTemplate",
    "OrderTemplate",
    "PbqTemplate",
    "TemplateValidationError",
    "encode_pair",
    "instantiate_template",
    "parse_template",
]
