"""
Expression parsing for token values.

The resolver is imported from tokenforge.core.expressions.resolver; the
function registry depends on this package, so it is not re-exported here.
"""

from .parser import (
    REFERENCE_PATTERN,
    FunctionCall,
    find_references,
    is_function,
    is_single_reference,
    parse_function,
    parse_object_literal,
    parse_percentage,
    split_arguments,
)

__all__ = [
    "REFERENCE_PATTERN",
    "FunctionCall",
    "find_references",
    "is_function",
    "is_single_reference",
    "parse_function",
    "parse_object_literal",
    "parse_percentage",
    "split_arguments",
]
