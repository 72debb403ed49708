from specfacts.webidl.analyzer import analyze, analyze_definitions
from specfacts.webidl.errors import IdlSyntaxError
from specfacts.webidl.parser import parse_idl
from specfacts.webidl.transforms import has_obsolete_idl, normalize_idl
from specfacts.webidl.types import WELL_KNOWN_TYPES

__all__ = [
    "analyze",
    "analyze_definitions",
    "parse_idl",
    "normalize_idl",
    "has_obsolete_idl",
    "IdlSyntaxError",
    "WELL_KNOWN_TYPES",
]
