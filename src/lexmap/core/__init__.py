from .comparer import (
    CaseInsensitiveComparer,
    CaseSensitiveComparer,
    ComparisonMode,
    KeyComparer,
    comparer_for,
)
from .lexicon import IndexAdapter, Lexicon
from .suffixes import Suffix, describe_suffixes, get_suffix, invoke_suffix, set_suffix
from .values import (
    BooleanValue,
    DoubleValue,
    IntegerValue,
    ListValue,
    StringValue,
    Value,
    from_primitive,
    to_value,
)

__all__ = [
    "CaseInsensitiveComparer",
    "CaseSensitiveComparer",
    "ComparisonMode",
    "KeyComparer",
    "comparer_for",
    "IndexAdapter",
    "Lexicon",
    "Suffix",
    "describe_suffixes",
    "get_suffix",
    "invoke_suffix",
    "set_suffix",
    "BooleanValue",
    "DoubleValue",
    "IntegerValue",
    "ListValue",
    "StringValue",
    "Value",
    "from_primitive",
    "to_value",
]
