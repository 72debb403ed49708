"""Tests for global contexts and the exposure map."""

from specfacts.config import AnalyzerConfig
from specfacts.model.idl import ExtendedAttribute
from specfacts.webidl import analyze
from specfacts.webidl.exposure import _PENDING, ExposureMapBuilder


class TestExposureMapBuilder:
    def test_pending_entries_go_to_default_global(self):
        builder = ExposureMapBuilder()
        builder.add("functions", [_PENDING], "A")
        exposure_map, primary = builder.build("Window")
        assert primary == "Window"
        assert exposure_map.functions == {"Window": ("A",)}

    def test_pending_entries_follow_explicit_ones(self):
        builder = ExposureMapBuilder()
        builder.add("functions", [_PENDING], "A")
        builder.add("functions", ["Window", "Worker"], "B")
        exposure_map, _ = builder.build("Window")
        assert exposure_map.functions == {"Window": ("B", "A"), "Worker": ("B",)}

    def test_declared_primary_global_wins(self):
        builder = ExposureMapBuilder()
        builder.primary_global = "Custom"
        builder.add("constructors", [_PENDING], "A")
        exposure_map, primary = builder.build("Window")
        assert primary == "Custom"
        assert exposure_map.constructors == {"Custom": ("A",)}
        assert exposure_map.objects == {}


class TestExposure:
    def test_exposed_contexts(self):
        report = analyze("[Exposed=(Window,Worker)] interface A {};")
        assert report.exposed == {"Window": ("A",), "Worker": ("A",)}
        assert report.exposure_map.functions == {"Window": ("A",), "Worker": ("A",)}
        assert report.dependencies["A"] == {"Window", "Worker"}

    def test_exposed_everywhere(self):
        report = analyze("[Exposed=*] interface A {};")
        assert report.exposure_map.functions == {"*": ("A",)}
        assert report.dependencies["A"] == frozenset()

    def test_constructor_member(self):
        report = analyze("[Exposed=Window] interface A { constructor(); };")
        assert report.exposure_map.constructors == {"Window": ("A",)}
        assert report.exposure_map.functions == {}

    def test_no_interface_object(self):
        report = analyze(
            "[LegacyNoInterfaceObject] interface A {}; [NoInterfaceObject] interface B {};"
        )
        assert report.exposure_map.contexts() == set()

    def test_mixins_namespaces_and_dictionaries_are_not_functions(self):
        report = analyze(
            "interface mixin M {}; namespace N {}; dictionary D {}; "
            "callback interface C { undefined run(); };"
        )
        assert report.exposure_map.functions == {}

    def test_partial_exposure_is_ignored(self):
        report = analyze("[Exposed=Worker] partial interface A {};")
        assert report.exposure_map.contexts() == set()
        assert report.exposed == {}

    def test_custom_default_global(self):
        report = analyze("interface A {};", AnalyzerConfig(default_global="Worklet"))
        assert report.primary_global == "Worklet"
        assert report.exposure_map.functions == {"Worklet": ("A",)}


class TestGlobals:
    def test_global_with_own_name(self):
        report = analyze("[Global=Window, Exposed=Window] interface Window {};")
        assert report.globals == {"Window": ("Window",)}
        assert list(report.idl_names) == ["Window"]

    def test_global_without_value(self):
        report = analyze("[Global] interface Foo {};")
        assert report.globals == {"Foo": ("Foo",)}

    def test_global_list_registers_names(self):
        report = analyze(
            "[Global=(Worker,DedicatedWorker), Exposed=DedicatedWorker] "
            "interface DedicatedWorkerGlobalScope {};"
        )
        assert report.globals == {
            "Worker": ("DedicatedWorkerGlobalScope",),
            "DedicatedWorker": ("DedicatedWorkerGlobalScope",),
        }
        assert {"Worker", "DedicatedWorker"} <= set(report.idl_names)
        assert report.idl_names["Worker"].name == "DedicatedWorkerGlobalScope"
        assert report.external_dependencies == ()

    def test_real_definition_replaces_global_name(self):
        report = analyze("[Global=Worker] interface WorkerGlobalScope {}; interface Worker {};")
        assert report.idl_names["Worker"].name == "Worker"
        assert report.diagnostics == ()

    def test_primary_global(self):
        report = analyze(
            "[PrimaryGlobal=MyGlobal] interface MyGlobalScope {}; interface Thing {};"
        )
        assert report.primary_global == "MyGlobal"
        assert report.globals == {"MyGlobal": ("MyGlobalScope",)}
        assert report.exposure_map.functions == {"MyGlobal": ("MyGlobalScope", "Thing")}
        assert "MyGlobal" in report.idl_names

    def test_primary_global_declared_later(self):
        report = analyze("interface Thing {}; [PrimaryGlobal] interface Scope {};")
        assert report.primary_global == "Scope"
        assert report.exposure_map.functions == {"Scope": ("Thing", "Scope")}

    def test_conflicting_primary_globals(self):
        report = analyze(
            "[PrimaryGlobal=First] interface A {}; [PrimaryGlobal=Second] interface B {};"
        )
        assert report.primary_global == "First"
        assert [d.rule for d in report.diagnostics] == ["duplicate-primary-global"]
        assert report.globals == {"First": ("A",), "Second": ("B",)}


class TestConstructors:
    def test_named_constructor(self):
        report = analyze(
            "[Exposed=Window, NamedConstructor=Audio(optional DOMString src)] "
            "interface HTMLAudioElement {};"
        )
        assert report.exposure_map.constructors == {"Window": ("Audio",)}
        assert report.exposure_map.functions == {}
        assert isinstance(report.idl_names["Audio"], ExtendedAttribute)

    def test_legacy_factory_function_arguments(self):
        report = analyze(
            "[LegacyFactoryFunction=Option(Label text)] interface HTMLOptionElement {};"
        )
        assert report.exposure_map.constructors == {"Window": ("Option",)}
        assert report.dependencies["HTMLOptionElement"] == {"Label"}

    def test_constructor_attribute(self):
        report = analyze("[Constructor(Init init), Exposed=Worker] interface A {};")
        assert report.exposure_map.constructors == {"Worker": ("A",)}
        assert report.dependencies["A"] == {"Init", "Worker"}
