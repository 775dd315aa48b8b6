"""Shared type definitions for tracegraph.

Enums and the symbol-type inference rules used across the graph model,
layout engines and impact traversal.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class SymbolType(Enum):
    PRODUCTLINE = "productline"
    FEATURESET = "featureset"
    FEATURE = "feature"
    FUNCTIONSET = "functionset"
    FUNCTION = "function"
    BLOCK = "block"
    REQSET = "reqset"
    REQUIREMENT = "requirement"
    TESTSET = "testset"
    TESTCASE = "testcase"
    CONFIG = "config"
    CONFIGSET = "configset"
    VARIANTSET = "variantset"
    PORT = "port"
    UNKNOWN = "unknown"

    @classmethod
    def default(cls) -> SymbolType:
        return cls.UNKNOWN


class Orientation(Enum):
    TopToBottom = "top-to-bottom"
    LeftToRight = "left-to-right"

    @classmethod
    def default(cls) -> Orientation:
        return cls.TopToBottom


# Organisational containers: their members carry the meaning, not the set.
SET_TYPES: frozenset[SymbolType] = frozenset(
    {
        SymbolType.FEATURESET,
        SymbolType.FUNCTIONSET,
        SymbolType.REQSET,
        SymbolType.TESTSET,
        SymbolType.CONFIGSET,
        SymbolType.VARIANTSET,
    }
)

CONFIG_TYPES: frozenset[SymbolType] = frozenset({SymbolType.CONFIG, SymbolType.CONFIGSET})

# Vertical level order of the main traceability hierarchy.
TYPE_ORDER: tuple[SymbolType, ...] = (
    SymbolType.PRODUCTLINE,
    SymbolType.FEATURESET,
    SymbolType.FEATURE,
    SymbolType.FUNCTIONSET,
    SymbolType.FUNCTION,
    SymbolType.REQSET,
    SymbolType.REQUIREMENT,
    SymbolType.TESTSET,
    SymbolType.TESTCASE,
    SymbolType.BLOCK,
)

_TYPE_RANK: dict[SymbolType, int] = {t: i for i, t in enumerate(TYPE_ORDER)}

# Raw type spellings that name a known symbol type under another word.
_TYPE_ALIASES: dict[str, SymbolType] = {
    "requirementset": SymbolType.REQSET,
    "testcaseset": SymbolType.TESTSET,
}


def type_rank(symbol_type: SymbolType) -> int:
    """Level index of a symbol type; types outside TYPE_ORDER sort last."""
    return _TYPE_RANK.get(symbol_type, len(TYPE_ORDER))


@dataclass(frozen=True)
class SymbolRule:
    """One step of the inference chain: first matching rule wins."""

    result: SymbolType
    name_prefixes: tuple[str, ...] = ()
    name_contains: tuple[str, ...] = ()
    extensions: tuple[str, ...] = ()

    def matches(self, name: str, extension: str) -> bool:
        if extension and extension in self.extensions:
            return True
        if any(name.startswith(p) for p in self.name_prefixes):
            return True
        return any(token in name for token in self.name_contains)


SYMBOL_RULES: tuple[SymbolRule, ...] = (
    SymbolRule(SymbolType.CONFIG, name_prefixes=("c_",), extensions=("vcf",)),
    SymbolRule(SymbolType.PRODUCTLINE, name_contains=("productline",), extensions=("ple",)),
    SymbolRule(SymbolType.FEATURESET, name_contains=("featureset", "features")),
    SymbolRule(SymbolType.FEATURE, name_contains=("feature",), extensions=("fml",)),
    SymbolRule(SymbolType.FUNCTIONSET, name_contains=("functionset", "functions")),
    SymbolRule(SymbolType.FUNCTION, name_contains=("function",), extensions=("fun",)),
    SymbolRule(SymbolType.BLOCK, name_contains=("block",), extensions=("blk",)),
    SymbolRule(SymbolType.REQSET, name_contains=("reqset", "requirements")),
    SymbolRule(SymbolType.REQUIREMENT, name_contains=("req_", "requirement"), extensions=("req",)),
    SymbolRule(SymbolType.TESTSET, name_contains=("testset", "tests")),
    SymbolRule(SymbolType.TESTCASE, name_contains=("testcase", "tc_"), extensions=("tst",)),
    SymbolRule(SymbolType.VARIANTSET, name_contains=("variantset",), extensions=("vml",)),
    SymbolRule(SymbolType.CONFIGSET, name_contains=("configset",)),
    SymbolRule(SymbolType.CONFIG, name_contains=("config",)),
)


def parse_symbol_type(raw: str | None) -> SymbolType | None:
    """Map a declared type string onto SymbolType; None when unrecognised."""
    if not raw:
        return None
    key = raw.strip().lower()
    if key in _TYPE_ALIASES:
        return _TYPE_ALIASES[key]
    try:
        return SymbolType(key)
    except ValueError:
        return None


def infer_symbol_type(
    raw_type: str | SymbolType | None,
    display_name: str = "",
    file_extension: str = "",
    rules: tuple[SymbolRule, ...] = SYMBOL_RULES,
) -> SymbolType:
    """Resolve a node's symbol type.

    A recognised declared type wins. Otherwise the ordered rule chain is
    matched against the lower-cased display name and file extension; a node
    matching nothing is UNKNOWN.

    Args:
        raw_type: Declared type, either a SymbolType or a raw string.
        display_name: Node display name (matched case-insensitively).
        file_extension: Source file extension, with or without a leading dot.
        rules: Rule chain to apply, in priority order.

    Returns:
        The resolved SymbolType.
    """
    if isinstance(raw_type, SymbolType) and raw_type is not SymbolType.UNKNOWN:
        return raw_type
    declared = parse_symbol_type(raw_type) if isinstance(raw_type, str) else None
    if declared is not None and declared is not SymbolType.UNKNOWN:
        return declared

    name = (display_name or "").lower()
    extension = (file_extension or "").lower().lstrip(".")
    for rule in rules:
        if rule.matches(name, extension):
            return rule.result
    return SymbolType.UNKNOWN


def is_set_type(symbol_type: SymbolType) -> bool:
    return symbol_type in SET_TYPES


