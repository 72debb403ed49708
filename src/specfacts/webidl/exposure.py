"""Exposure resolution: which interfaces are visible in which global context."""

from __future__ import annotations

import logging

from specfacts.model.idl import IdlNode, NodeKind
from specfacts.model.report import ExposureMap
from specfacts.webidl.builder import ReportBuilder
from specfacts.webidl.types import WELL_KNOWN_TYPES, resolve_arguments

logger = logging.getLogger(__name__)

_NAMED_CONSTRUCTORS = ("NamedConstructor", "LegacyFactoryFunction")
_NO_INTERFACE_OBJECT = ("NoInterfaceObject", "LegacyNoInterfaceObject")


class _PendingPrimaryGlobal:
    """Context key for "the primary global", resolved by ExposureMapBuilder.build."""

    def __repr__(self) -> str:
        return "<primary global>"


_PENDING = _PendingPrimaryGlobal()

Context = str | _PendingPrimaryGlobal


class ExposureMapBuilder:
    """Accumulate exposure entries, some of them on a not-yet-known global."""

    def __init__(self) -> None:
        self.primary_global: str | None = None
        self._buckets: dict[str, dict[Context, list[str]]] = {
            "constructors": {},
            "functions": {},
            "objects": {},
        }

    def add(self, bucket: str, contexts: list[Context], name: str) -> None:
        entries = self._buckets[bucket]
        for context in contexts:
            entries.setdefault(context, []).append(name)

    def build(self, default_global: str) -> tuple[ExposureMap, str]:
        """Merge pending entries into the primary global and freeze the map."""
        primary = self.primary_global or default_global
        frozen: dict[str, dict[str, tuple[str, ...]]] = {}
        for bucket, entries in self._buckets.items():
            pending = entries.get(_PENDING, [])
            result: dict[str, tuple[str, ...]] = {}
            for context, names in entries.items():
                if context is _PENDING:
                    continue
                result[context] = tuple(names)  # type: ignore[index]
            if pending:
                result[primary] = result.get(primary, ()) + tuple(pending)
            frozen[bucket] = result
        return ExposureMap(**frozen), primary


def _contexts(node: IdlNode) -> list[Context]:
    exposed = node.ext_attr("Exposed")
    if exposed is not None and exposed.rhs is not None:
        return list(exposed.rhs.names)
    return [_PENDING]


def resolve_exposure(
    node: IdlNode,
    builder: ReportBuilder,
    exposure: ExposureMapBuilder,
    well_known: frozenset[str] = WELL_KNOWN_TYPES,
) -> None:
    """Apply the exposure-related extended attributes of a definition."""
    name = node.name
    contexts = _contexts(node)

    exposed = node.ext_attr("Exposed")
    if exposed is not None and exposed.rhs is not None:
        for context in exposed.rhs.names:
            builder.add_exposed(context, name)
            if context != "*":
                builder.add_dependency(name, context)

    global_ea = node.ext_attr("Global")
    if global_ea is not None:
        global_names = global_ea.rhs.names if global_ea.rhs is not None else (name,)
        for global_name in global_names:
            builder.add_global(global_name, name)
            if global_name != name:
                builder.register(global_name, node, alias=True)

    primary_ea = node.ext_attr("PrimaryGlobal")
    if primary_ea is not None:
        primary = primary_ea.rhs.names[0] if primary_ea.rhs is not None else name
        if exposure.primary_global is None:
            exposure.primary_global = primary
        elif exposure.primary_global != primary:
            builder.diagnose(
                "duplicate-primary-global",
                f"'{name}' declares primary global '{primary}' but "
                f"'{exposure.primary_global}' was declared first",
                name=name,
            )
        builder.add_global(primary, name)
        if primary != name:
            builder.register(primary, node, alias=True)

    constructors = [ea for ea in node.ext_attrs if ea.name == "Constructor"]
    named = [ea for ea in node.ext_attrs if ea.name in _NAMED_CONSTRUCTORS]
    if constructors:
        exposure.add("constructors", contexts, name)
        for ea in constructors:
            resolve_arguments(ea.arguments or (), name, builder, well_known)
    elif named:
        for ea in named:
            if ea.rhs is None:
                logger.debug("[%s] without a name on %s", ea.name, name)
                continue
            constructor_name = ea.rhs.names[0]
            builder.register(constructor_name, ea, alias=True)
            exposure.add("constructors", contexts, constructor_name)
            resolve_arguments(ea.arguments or (), name, builder, well_known)
    elif any(m.kind == NodeKind.CONSTRUCTOR for m in node.members):
        exposure.add("constructors", contexts, name)
    elif node.kind == NodeKind.INTERFACE and not node.has_ext_attr(*_NO_INTERFACE_OBJECT):
        exposure.add("functions", contexts, name)
