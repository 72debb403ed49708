"""Checks over a finished analyzer report.

Each rule is a function taking an AnalyzerReport and returning a list of
Diagnostic objects describing any issues found.
"""

from __future__ import annotations

from specfacts.model.diagnostic import Diagnostic, Severity
from specfacts.model.report import AnalyzerReport


# ---------------------------------------------------------------------------
# Consistency rules (ERROR severity)
# ---------------------------------------------------------------------------


def check_external_overlap(report: AnalyzerReport) -> list[Diagnostic]:
    """External dependencies must not name anything defined locally."""
    overlap = [n for n in report.external_dependencies if n in report.idl_names]
    return [
        Diagnostic(
            rule="check_external_overlap",
            severity=Severity.ERROR,
            message=f"'{name}' is both defined locally and listed as an external dependency.",
            name=name,
        )
        for name in overlap
    ]


def check_dependency_entries(report: AnalyzerReport) -> list[Diagnostic]:
    """Every defined IDL name needs an entry in the dependency graph."""
    diagnostics: list[Diagnostic] = []
    for name in report.idl_names:
        if name not in report.dependencies:
            diagnostics.append(
                Diagnostic(
                    rule="check_dependency_entries",
                    severity=Severity.ERROR,
                    message=f"'{name}' is defined but has no dependencies entry.",
                    name=name,
                )
            )
    return diagnostics


# ---------------------------------------------------------------------------
# Style rules (WARNING severity)
# ---------------------------------------------------------------------------


def check_obsolete_syntax(report: AnalyzerReport) -> list[Diagnostic]:
    if not report.has_obsolete_syntax:
        return []
    return [
        Diagnostic(
            rule="check_obsolete_syntax",
            severity=Severity.WARNING,
            message="IDL uses constructs removed in WebIDL 2 (T[] attributes or serializers).",
            fix="Use FrozenArray<T> and a [Default] object toJSON() operation.",
        )
    ]


# ---------------------------------------------------------------------------
# Informational rules (INFO severity)
# ---------------------------------------------------------------------------


def check_exposed_on_unknown_global(report: AnalyzerReport) -> list[Diagnostic]:
    """Flag [Exposed] contexts this IDL does not declare itself."""
    known = set(report.globals) | {report.primary_global, "*"}
    diagnostics: list[Diagnostic] = []
    for context, interfaces in report.exposed.items():
        if context in known:
            continue
        diagnostics.append(
            Diagnostic(
                rule="check_exposed_on_unknown_global",
                severity=Severity.INFO,
                message=(
                    f"Context '{context}' (used by {', '.join(interfaces)}) "
                    "is not declared by a [Global] in this IDL."
                ),
                name=context,
            )
        )
    return diagnostics


def check_window_dependency(report: AnalyzerReport) -> list[Diagnostic]:
    if not report.really_depends_on_window:
        return []
    return [
        Diagnostic(
            rule="check_window_dependency",
            severity=Severity.INFO,
            message="IDL references Window as a type, parent or included interface.",
            name="Window",
        )
    ]


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

ALL_RULES = [
    check_external_overlap,
    check_dependency_entries,
    check_obsolete_syntax,
    check_exposed_on_unknown_global,
    check_window_dependency,
]
