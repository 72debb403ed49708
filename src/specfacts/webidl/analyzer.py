"""WebIDL semantic analyzer.

Walks the top-level definitions of one specification, in source order, and
computes the IDL names it defines, the names each of them depends on, the
names it needs from elsewhere and the interfaces exposed per global context.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from specfacts.config import AnalyzerConfig
from specfacts.model.idl import IdlNode, NodeKind
from specfacts.model.report import AnalyzerReport
from specfacts.webidl.builder import ReportBuilder
from specfacts.webidl.exposure import ExposureMapBuilder, resolve_exposure
from specfacts.webidl.members import walk_members
from specfacts.webidl.parser import parse_idl
from specfacts.webidl.transforms import has_obsolete_idl, normalize_idl
from specfacts.webidl.types import WELL_KNOWN_TYPES, resolve_arguments, resolve_type

__all__ = ["analyze", "analyze_definitions"]

logger = logging.getLogger(__name__)

_CONTAINER_KINDS = frozenset({
    NodeKind.INTERFACE,
    NodeKind.INTERFACE_MIXIN,
    NodeKind.DICTIONARY,
    NodeKind.NAMESPACE,
    NodeKind.CALLBACK_INTERFACE,
})

# Definitions that can be visible from script.
_EXPOSABLE_KINDS = frozenset({
    NodeKind.INTERFACE,
    NodeKind.INTERFACE_MIXIN,
    NodeKind.NAMESPACE,
})


class _Analysis:
    def __init__(self, config: AnalyzerConfig) -> None:
        self.config = config
        self.builder = ReportBuilder()
        self.exposure = ExposureMapBuilder()
        self.well_known = WELL_KNOWN_TYPES | config.extra_well_known_types

    def run(self, definitions: Iterable[IdlNode], has_obsolete_syntax: bool) -> AnalyzerReport:
        for node in definitions:
            self.definition(node)
        exposure_map, primary = self.exposure.build(self.config.default_global)
        return self.builder.build(exposure_map, primary, has_obsolete_syntax)

    def definition(self, node: IdlNode) -> None:
        kind = node.kind
        if kind in _CONTAINER_KINDS:
            self.container(node)
        elif kind == NodeKind.ENUM:
            if self.builder.register(node.name, node):
                walk_members(node, node.name, self.builder, self.well_known)
        elif kind == NodeKind.TYPEDEF:
            if self.builder.register(node.name, node):
                resolve_type(node.idl_type, node.name, self.builder, self.well_known)
        elif kind == NodeKind.CALLBACK:
            if self.builder.register(node.name, node):
                resolve_type(node.idl_type, node.name, self.builder, self.well_known)
                resolve_arguments(node.arguments, node.name, self.builder, self.well_known)
        elif kind in (NodeKind.INCLUDES, NodeKind.IMPLEMENTS):
            self.includes(node)
        else:
            self.builder.diagnose(
                "unknown-definition",
                f"Unhandled IDL definition kind '{kind}'",
                name=node.name or None,
            )

    def container(self, node: IdlNode) -> None:
        builder = self.builder
        name = node.name
        if node.partial:
            builder.extend(name, node)
            # Links the partial back to the name it extends.
            builder.add_dependency(name, name)
        elif not builder.register(name, node):
            return

        if node.inheritance:
            builder.add_dependency(name, node.inheritance)
            builder.mark_window(node.inheritance)

        if not node.partial and node.kind in _EXPOSABLE_KINDS:
            resolve_exposure(node, builder, self.exposure, self.well_known)

        walk_members(node, name, builder, self.well_known)

    def includes(self, node: IdlNode) -> None:
        builder = self.builder
        builder.extend(node.target, node)
        builder.reference(node.target)
        builder.add_dependency(node.target, node.includes)
        builder.mark_window(node.includes)


def analyze_definitions(
    definitions: Iterable[IdlNode],
    config: AnalyzerConfig | None = None,
    *,
    has_obsolete_syntax: bool = False,
) -> AnalyzerReport:
    """Analyze an already parsed list of top-level definitions."""
    return _Analysis(config or AnalyzerConfig()).run(definitions, has_obsolete_syntax)


def analyze(idl_text: str, config: AnalyzerConfig | None = None) -> AnalyzerReport:
    """Parse and analyze the IDL of one specification.

    Raises :class:`~specfacts.webidl.errors.IdlSyntaxError` when the text is
    not valid WebIDL. Semantic problems never raise; they are listed in the
    report diagnostics.
    """
    config = config or AnalyzerConfig()
    obsolete = has_obsolete_idl(idl_text)
    if obsolete:
        logger.info("IDL uses obsolete constructs, rewriting before parsing")
    if config.normalize:
        source = normalize_idl(idl_text, list(config.extra_transforms))
    else:
        source = idl_text
    definitions = parse_idl(source)
    report = analyze_definitions(definitions, config, has_obsolete_syntax=obsolete)
    logger.debug(
        "Analyzed %d definitions: %d names, %d external dependencies",
        len(definitions),
        len(report.idl_names),
        len(report.external_dependencies),
    )
    return report
