"""specfacts model layer -- public type re-exports."""

from specfacts.model.diagnostic import Diagnostic, Severity
from specfacts.model.grammar import (
    AllOf,
    AnyOf,
    Function,
    GrammarNode,
    Keyword,
    OneOf,
    Primitive,
    PropertyRef,
    Sequence,
    StringLiteral,
    Token,
    TokenKind,
    ValueSpace,
)
from specfacts.model.idl import (
    Argument,
    ExtendedAttribute,
    ExtendedAttributeValue,
    IdlNode,
    IdlType,
    NodeKind,
)
from specfacts.model.report import AnalyzerReport, ExposureMap

__all__ = [
    # diagnostic
    "Severity",
    "Diagnostic",
    # css grammar
    "TokenKind",
    "Token",
    "GrammarNode",
    "Keyword",
    "Primitive",
    "ValueSpace",
    "PropertyRef",
    "StringLiteral",
    "Function",
    "Sequence",
    "AllOf",
    "AnyOf",
    "OneOf",
    # idl ast
    "NodeKind",
    "IdlNode",
    "IdlType",
    "Argument",
    "ExtendedAttribute",
    "ExtendedAttributeValue",
    # report
    "ExposureMap",
    "AnalyzerReport",
]
