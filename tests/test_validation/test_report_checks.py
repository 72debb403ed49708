"""Tests for report checks and the validator."""

import pytest

from specfacts.model.diagnostic import Diagnostic, Severity
from specfacts.model.report import AnalyzerReport, ExposureMap
from specfacts.validation import ValidationError, validate, validate_or_raise
from specfacts.validation.rules import (
    check_dependency_entries,
    check_exposed_on_unknown_global,
    check_external_overlap,
    check_obsolete_syntax,
    check_window_dependency,
)
from specfacts.webidl import analyze


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _report(**overrides) -> AnalyzerReport:
    """Build a minimal clean report with a single definition."""
    node = analyze("dictionary Opts {};").idl_names["Opts"]
    defaults = dict(
        dependencies={"Opts": frozenset()},
        idl_names={"Opts": node},
        idl_extended_names={},
        external_dependencies=(),
        exposure_map=ExposureMap(),
    )
    defaults.update(overrides)
    return AnalyzerReport(**defaults)


# ---------------------------------------------------------------------------
# Consistency rules
# ---------------------------------------------------------------------------


class TestCheckExternalOverlap:
    def test_clean(self):
        assert check_external_overlap(_report(external_dependencies=("Node",))) == []

    def test_overlap(self):
        diags = check_external_overlap(_report(external_dependencies=("Opts",)))
        assert len(diags) == 1
        assert diags[0].severity is Severity.ERROR
        assert diags[0].name == "Opts"


class TestCheckDependencyEntries:
    def test_missing_entry(self):
        diags = check_dependency_entries(_report(dependencies={}))
        assert [d.name for d in diags] == ["Opts"]
        assert diags[0].is_error

    def test_analyzed_report_is_complete(self):
        report = analyze("interface A {}; [Global=Scope] interface B {};")
        assert check_dependency_entries(report) == []


# ---------------------------------------------------------------------------
# Style and informational rules
# ---------------------------------------------------------------------------


class TestCheckObsoleteSyntax:
    def test_modern(self):
        assert check_obsolete_syntax(_report()) == []

    def test_obsolete(self):
        diags = check_obsolete_syntax(_report(has_obsolete_syntax=True))
        assert len(diags) == 1
        assert diags[0].is_warning
        assert "FrozenArray" in diags[0].fix


class TestCheckExposedOnUnknownGlobal:
    def test_known_contexts(self):
        report = _report(
            exposed={"Window": ("A",), "*": ("B",), "Worker": ("C",)},
            globals={"Worker": ("WorkerGlobalScope",)},
        )
        assert check_exposed_on_unknown_global(report) == []

    def test_unknown_context(self):
        diags = check_exposed_on_unknown_global(_report(exposed={"Worker": ("A", "B")}))
        assert len(diags) == 1
        assert diags[0].severity is Severity.INFO
        assert diags[0].name == "Worker"
        assert "A, B" in diags[0].message


class TestCheckWindowDependency:
    def test_no_window(self):
        assert check_window_dependency(_report()) == []

    def test_window(self):
        diags = check_window_dependency(_report(really_depends_on_window=True))
        assert [d.severity for d in diags] == [Severity.INFO]


# ---------------------------------------------------------------------------
# Validator
# ---------------------------------------------------------------------------


class TestValidate:
    def test_clean_report(self):
        assert validate(_report()) == []

    def test_report_diagnostics_come_first(self):
        report = analyze("interface A {}; interface A {}; interface B : Window {};")
        diags = validate(report)
        assert [d.rule for d in diags] == ["duplicate-name", "check_window_dependency"]

    def test_extra_rules(self):
        def no_dictionaries(report):
            return [
                Diagnostic(rule="no_dictionaries", severity=Severity.ERROR, message="no", name=n)
                for n in report.idl_names
            ]

        diags = validate(_report(), extra_rules=[no_dictionaries])
        assert [d.rule for d in diags] == ["no_dictionaries"]

    def test_validate_or_raise_passes_warnings(self):
        diags = validate_or_raise(_report(has_obsolete_syntax=True))
        assert len(diags) == 1

    def test_validate_or_raise_errors(self):
        with pytest.raises(ValidationError) as info:
            validate_or_raise(_report(dependencies={}))
        assert len(info.value.diagnostics) == 1
        assert "1 error(s)" in str(info.value)
        assert "names: Opts" in str(info.value)
