"""Mutable accumulator behind an :class:`AnalyzerReport`."""

from __future__ import annotations

import logging

from specfacts.model.diagnostic import Diagnostic, Severity
from specfacts.model.idl import IdlNode
from specfacts.model.report import AnalyzerReport, ExposureMap, IdlNameTarget

logger = logging.getLogger(__name__)

# Spellings of the main browsing context global.
WINDOW_NAMES = frozenset({"window", "Window"})


class ReportBuilder:
    """Collect names, dependencies and diagnostics while walking an IDL AST.

    Names registered as aliases (global names declared by ``[Global]`` and
    constructor names declared by ``[NamedConstructor]``) yield to a real
    definition of the same name and never count as duplicates.
    """

    def __init__(self) -> None:
        self.idl_names: dict[str, IdlNameTarget] = {}
        self.idl_extended_names: dict[str, list[IdlNode]] = {}
        self.dependencies: dict[str, set[str]] = {}
        self.globals: dict[str, list[str]] = {}
        self.exposed: dict[str, list[str]] = {}
        self.diagnostics: list[Diagnostic] = []
        self.really_depends_on_window = False
        self._aliases: set[str] = set()
        self._referenced: dict[str, None] = {}

    # ---- names ----

    def register(self, name: str, target: IdlNameTarget, alias: bool = False) -> bool:
        """Record *name* as defined locally.

        Returns False when *name* is already taken; a second real definition
        is reported as a ``duplicate-name`` diagnostic.
        """
        if name not in self.idl_names or (name in self._aliases and not alias):
            self.idl_names[name] = target
            self.dependencies.setdefault(name, set())
            if alias:
                self._aliases.add(name)
            else:
                self._aliases.discard(name)
            return True
        if not alias:
            self.diagnose(
                "duplicate-name",
                f"'{name}' is defined more than once; the later definition is ignored",
                name=name,
            )
        return False

    def extend(self, name: str, node: IdlNode) -> None:
        """Record a partial definition or includes statement for *name*."""
        self.idl_extended_names.setdefault(name, []).append(node)

    # ---- dependencies ----

    def reference(self, name: str) -> None:
        """Note that *name* is used; unknown names become external dependencies."""
        self._referenced.setdefault(name, None)

    def add_dependency(self, owner: str, name: str) -> None:
        self.dependencies.setdefault(owner, set()).add(name)
        self.reference(name)

    def mark_window(self, name: str) -> None:
        if name in WINDOW_NAMES:
            self.really_depends_on_window = True

    # ---- exposure bookkeeping ----

    def add_global(self, context: str, interface: str) -> None:
        self.globals.setdefault(context, []).append(interface)

    def add_exposed(self, context: str, interface: str) -> None:
        self.exposed.setdefault(context, []).append(interface)

    # ---- diagnostics ----

    def diagnose(
        self,
        rule: str,
        message: str,
        name: str | None = None,
        severity: Severity = Severity.WARNING,
    ) -> None:
        diagnostic = Diagnostic(rule=rule, severity=severity, message=message, name=name)
        self.diagnostics.append(diagnostic)
        logger.warning("%s", diagnostic)

    # ---- result ----

    def build(
        self,
        exposure_map: ExposureMap,
        primary_global: str,
        has_obsolete_syntax: bool = False,
    ) -> AnalyzerReport:
        external = tuple(n for n in self._referenced if n not in self.idl_names)
        return AnalyzerReport(
            dependencies={k: frozenset(v) for k, v in self.dependencies.items()},
            idl_names=dict(self.idl_names),
            idl_extended_names={k: tuple(v) for k, v in self.idl_extended_names.items()},
            external_dependencies=external,
            exposure_map=exposure_map,
            really_depends_on_window=self.really_depends_on_window,
            globals={k: tuple(v) for k, v in self.globals.items()},
            exposed={k: tuple(v) for k, v in self.exposed.items()},
            primary_global=primary_global,
            has_obsolete_syntax=has_obsolete_syntax,
            diagnostics=tuple(self.diagnostics),
        )
