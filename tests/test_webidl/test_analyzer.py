"""Tests for the WebIDL analyzer: names, dependencies and window usage."""

import json
from pathlib import Path

import pytest

from specfacts.config import AnalyzerConfig
from specfacts.model.diagnostic import Severity
from specfacts.model.idl import ExtendedAttribute, IdlNode, NodeKind
from specfacts.webidl import IdlSyntaxError, analyze, analyze_definitions

FIXTURES = Path(__file__).parent.parent / "fixtures"


@pytest.fixture()
def events_report():
    return analyze((FIXTURES / "events.idl").read_text())


def _rules(report) -> list[str]:
    return [d.rule for d in report.diagnostics]


# ---------------------------------------------------------------------------
# Fixture file
# ---------------------------------------------------------------------------


class TestEventsReport:
    def test_idl_names_in_source_order(self, events_report):
        assert list(events_report.idl_names) == [
            "EventTarget",
            "EventListener",
            "EventListenerOptions",
            "AddEventListenerOptions",
            "Event",
            "EventInit",
            "EventPhaseName",
            "EventOrString",
            "EventHandlerNonNull",
            "GlobalEventHandlers",
        ]

    def test_partial_and_includes_are_extended_names(self, events_report):
        assert "Window" not in events_report.idl_names
        extended = events_report.idl_extended_names["Window"]
        assert [n.kind for n in extended] == [NodeKind.INTERFACE, NodeKind.INCLUDES]
        assert extended[0].partial

    def test_dependencies(self, events_report):
        deps = events_report.dependencies
        assert deps["EventTarget"] == {
            "Window",
            "Worker",
            "EventListener",
            "AddEventListenerOptions",
            "Event",
        }
        assert deps["AddEventListenerOptions"] == {"EventListenerOptions", "AbortSignal"}
        assert deps["Event"] == {"EventInit", "EventTarget"}
        assert deps["EventInit"] == frozenset()
        assert deps["EventOrString"] == {"Event"}
        assert deps["EventHandlerNonNull"] == {"Event"}
        assert deps["GlobalEventHandlers"] == {"EventHandlerNonNull"}

    def test_extended_name_dependencies(self, events_report):
        assert events_report.dependencies["Window"] == {
            "Window",
            "Event",
            "GlobalEventHandlers",
        }

    def test_every_name_has_a_dependency_entry(self, events_report):
        assert set(events_report.idl_names) <= set(events_report.dependencies)

    def test_external_dependencies(self, events_report):
        assert events_report.external_dependencies == ("Window", "Worker", "AbortSignal")

    def test_external_dependencies_never_defined_locally(self, events_report):
        for name in events_report.external_dependencies:
            assert name not in events_report.idl_names

    def test_extending_window_does_not_count(self, events_report):
        assert not events_report.really_depends_on_window

    def test_no_diagnostics(self, events_report):
        assert events_report.diagnostics == ()
        assert not events_report.has_obsolete_syntax

    def test_idempotent(self, events_report):
        assert analyze((FIXTURES / "events.idl").read_text()) == events_report


# ---------------------------------------------------------------------------
# Definitions
# ---------------------------------------------------------------------------


class TestDefinitions:
    def test_partial_only_is_not_an_idl_name(self):
        report = analyze("partial interface Foo { attribute Bar b; };")
        assert report.idl_names == {}
        assert report.dependencies["Foo"] == {"Foo", "Bar"}
        assert report.external_dependencies == ("Foo", "Bar")

    def test_partial_after_definition(self):
        report = analyze("interface Foo {}; partial interface Foo { attribute Bar b; };")
        assert report.idl_names["Foo"].partial is False
        assert len(report.idl_extended_names["Foo"]) == 1
        assert report.external_dependencies == ("Bar",)

    def test_mixin_include(self):
        report = analyze("interface mixin M {}; interface A {}; A includes M;")
        assert report.dependencies["A"] == {"M"}
        assert report.idl_extended_names["A"][0].includes == "M"
        assert report.external_dependencies == ()
        assert not report.really_depends_on_window

    def test_legacy_implements(self):
        report = analyze("interface A {}; A implements B;")
        assert report.dependencies["A"] == {"B"}
        assert report.external_dependencies == ("B",)

    def test_typedef_and_callback_own_their_types(self):
        report = analyze(
            "typedef sequence<Node> NodeList; callback Cb = Result (Input i);"
        )
        assert report.dependencies["NodeList"] == {"Node"}
        assert report.dependencies["Cb"] == {"Result", "Input"}

    def test_const_types_are_resolved(self):
        report = analyze("interface A { const Custom X = 1; };")
        assert report.dependencies["A"] == {"Custom"}

    def test_duplicate_name(self):
        report = analyze("interface A {}; interface A { attribute Foo f; };")
        assert _rules(report) == ["duplicate-name"]
        assert report.diagnostics[0].name == "A"
        assert report.diagnostics[0].severity is Severity.WARNING
        assert report.dependencies["A"] == frozenset()
        assert report.external_dependencies == ()

    def test_unknown_definition_kind(self):
        report = analyze_definitions([IdlNode(kind="bogus", name="X")])
        assert _rules(report) == ["unknown-definition"]
        assert report.diagnostics[0].name == "X"
        assert report.idl_names == {}

    def test_hand_built_definitions(self):
        node = IdlNode(kind=NodeKind.DICTIONARY, name="Opts")
        report = analyze_definitions([node], has_obsolete_syntax=True)
        assert report.idl_names == {"Opts": node}
        assert report.has_obsolete_syntax


# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------


class TestTypeResolution:
    def test_well_known_types_are_not_dependencies(self):
        report = analyze(
            "interface A { attribute ArrayBuffer b; attribute unsigned long n; "
            "Promise<undefined> f(BufferSource s, object o); attribute Custom c; };"
        )
        assert report.dependencies["A"] == {"Custom"}

    def test_generic_wrappers_are_not_dependencies(self):
        report = analyze("interface A { attribute FrozenArray<Item> items; };")
        assert report.dependencies["A"] == {"Item"}

    def test_extra_well_known_types(self):
        config = AnalyzerConfig(extra_well_known_types=frozenset({"Custom"}))
        report = analyze("interface A { attribute Custom c; };", config)
        assert report.dependencies["A"] == frozenset()

    def test_collection_members(self):
        report = analyze("interface A { iterable<Key, Value>; setlike<Entry>; };")
        assert report.dependencies["A"] == {"Key", "Value", "Entry"}

    def test_stringifier_is_skipped(self):
        report = analyze("interface A { stringifier; attribute Foo f; };")
        assert report.dependencies["A"] == {"Foo"}


# ---------------------------------------------------------------------------
# Window usage
# ---------------------------------------------------------------------------


class TestWindowDependency:
    def test_window_as_type(self):
        assert analyze("interface A { attribute Window w; };").really_depends_on_window

    def test_window_as_parent(self):
        assert analyze("interface A : Window {};").really_depends_on_window

    def test_window_as_included_name(self):
        assert analyze("interface A {}; A includes Window;").really_depends_on_window

    def test_window_as_includes_target_does_not_count(self):
        report = analyze("interface mixin M {}; Window includes M;")
        assert not report.really_depends_on_window
        assert report.dependencies["Window"] == {"M"}

    def test_lowercase_window(self):
        assert analyze("interface A { attribute window w; };").really_depends_on_window

    def test_exposed_on_window_does_not_count(self):
        report = analyze("[Exposed=Window] interface A {};")
        assert not report.really_depends_on_window
        assert report.dependencies["A"] == {"Window"}

    def test_default_exposure_does_not_count(self):
        report = analyze("interface A {};")
        assert not report.really_depends_on_window
        assert report.exposure_map.functions == {"Window": ("A",)}


# ---------------------------------------------------------------------------
# Obsolete syntax and errors
# ---------------------------------------------------------------------------


class TestLegacySyntax:
    def test_legacy_fixture(self):
        report = analyze((FIXTURES / "legacy.idl").read_text())
        assert report.has_obsolete_syntax
        assert list(report.idl_names) == ["Media"]
        assert report.dependencies["Media"] == frozenset()
        # Constructor wins over NamedConstructor.
        assert report.exposure_map.constructors == {"Window": ("Media",)}

    def test_normalization_disabled(self):
        with pytest.raises(IdlSyntaxError):
            analyze(
                (FIXTURES / "legacy.idl").read_text(),
                AnalyzerConfig(normalize=False),
            )

    def test_extra_transforms(self):
        class DropLegacyCaller:
            def apply(self, idl: str) -> str:
                return idl.replace("legacycaller ", "")

        config = AnalyzerConfig(extra_transforms=(DropLegacyCaller(),))
        report = analyze("interface A { legacycaller Thing get(long i); };", config)
        assert report.dependencies["A"] == {"Thing"}
        assert not report.has_obsolete_syntax

    def test_syntax_error(self):
        with pytest.raises(IdlSyntaxError) as info:
            analyze((FIXTURES / "invalid.idl").read_text())
        assert info.value.line == 2


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------


class TestReportDict:
    def test_keys(self, events_report):
        assert set(events_report.to_dict()) == {
            "jsNames",
            "idlNames",
            "idlExtendedNames",
            "globals",
            "exposed",
            "dependencies",
            "externalDependencies",
            "primaryGlobal",
            "reallyDependsOnWindow",
            "hasObsoleteIdl",
            "diagnostics",
        }

    def test_json_serializable(self, events_report):
        data = json.loads(json.dumps(events_report.to_dict()))
        assert data["externalDependencies"] == ["Window", "Worker", "AbortSignal"]
        assert data["dependencies"]["Window"] == ["Event", "GlobalEventHandlers", "Window"]
        assert data["idlNames"]["EventOrString"]["fragment"] == (
            "typedef (Event or DOMString) EventOrString;"
        )

    def test_named_constructor_entry(self):
        report = analyze("[LegacyFactoryFunction=Image(long w)] interface HTMLImageElement {};")
        assert isinstance(report.idl_names["Image"], ExtendedAttribute)
        assert report.to_dict()["idlNames"]["Image"]["name"] == "LegacyFactoryFunction"
