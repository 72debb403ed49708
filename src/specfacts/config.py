from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from specfacts.webidl.transforms import IdlTransform


@dataclass(frozen=True)
class AnalyzerConfig:
    default_global: str = "Window"
    normalize: bool = True  # rewrite pre-WebIDL-2 constructs before parsing
    # Applied after the built-in rewrites when normalize is set.
    extra_transforms: tuple[IdlTransform, ...] = ()
    extra_well_known_types: frozenset[str] = field(default_factory=frozenset)


@dataclass(frozen=True)
class GrammarConfig:
    extra_primitives: frozenset[str] = field(default_factory=frozenset)
