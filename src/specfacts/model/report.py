"""Analyzer report model: dependency graph, exposure map and IDL names."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

from specfacts.model.diagnostic import Diagnostic
from specfacts.model.idl import ExtendedAttribute, IdlNode

# idl_names values are definitions, except for names introduced by an
# extended attribute ([NamedConstructor=Image] registers "Image"). A name
# declared by [Global=X] or [PrimaryGlobal=X] maps to the declaring
# interface node; its .name is the owning interface name.
IdlNameTarget = Union[IdlNode, ExtendedAttribute]


@dataclass(frozen=True)
class ExposureMap:
    """Interface names visible from script, per global context.

    ``constructors`` lists what can be constructed with ``new``,
    ``functions`` lists interface objects; ``objects`` is reserved and
    always empty.
    """

    constructors: dict[str, tuple[str, ...]] = field(default_factory=dict)
    functions: dict[str, tuple[str, ...]] = field(default_factory=dict)
    objects: dict[str, tuple[str, ...]] = field(default_factory=dict)

    def contexts(self) -> set[str]:
        return set(self.constructors) | set(self.functions) | set(self.objects)

    def to_dict(self) -> dict[str, dict[str, list[str]]]:
        return {
            "constructors": {k: list(v) for k, v in self.constructors.items()},
            "functions": {k: list(v) for k, v in self.functions.items()},
            "objects": {k: list(v) for k, v in self.objects.items()},
        }


@dataclass(frozen=True)
class AnalyzerReport:
    """Result of analyzing the IDL of one specification.

    Attributes:
        dependencies: Defining IDL name to the IDL names it references.
        idl_names: Non-partial top-level definitions by name.
        idl_extended_names: Partial definitions and includes statements, by
            the name they extend.
        external_dependencies: Referenced names not defined locally, in
            first-reference order.
        exposure_map: Interface names per global context.
        really_depends_on_window: Whether ``Window`` is used as a type,
            inherited or included (default exposure does not count).
        globals: Global context name to the interfaces declaring it.
        exposed: Context name to the interfaces listing it in ``[Exposed]``.
        primary_global: Resolved primary global context name.
        has_obsolete_syntax: Whether legacy constructs had to be rewritten.
        diagnostics: Non-fatal findings collected during the analysis.
    """

    dependencies: dict[str, frozenset[str]]
    idl_names: dict[str, IdlNameTarget]
    idl_extended_names: dict[str, tuple[IdlNode, ...]]
    external_dependencies: tuple[str, ...]
    exposure_map: ExposureMap
    really_depends_on_window: bool = False
    globals: dict[str, tuple[str, ...]] = field(default_factory=dict)
    exposed: dict[str, tuple[str, ...]] = field(default_factory=dict)
    primary_global: str = "Window"
    has_obsolete_syntax: bool = False
    diagnostics: tuple[Diagnostic, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-ready dict with camelCase report keys."""
        return {
            "jsNames": self.exposure_map.to_dict(),
            "idlNames": {k: v.to_dict() for k, v in self.idl_names.items()},
            "idlExtendedNames": {
                k: [n.to_dict() for n in v]
                for k, v in self.idl_extended_names.items()
            },
            "globals": {k: list(v) for k, v in self.globals.items()},
            "exposed": {k: list(v) for k, v in self.exposed.items()},
            "dependencies": {
                k: sorted(v) for k, v in self.dependencies.items()
            },
            "externalDependencies": list(self.external_dependencies),
            "primaryGlobal": self.primary_global,
            "reallyDependsOnWindow": self.really_depends_on_window,
            "hasObsoleteIdl": self.has_obsolete_syntax,
            "diagnostics": [d.to_dict() for d in self.diagnostics],
        }
