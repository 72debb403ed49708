"""Member walker: resolve the types used by the members of a definition."""

from __future__ import annotations

import logging

from specfacts.model.idl import IdlNode, NodeKind
from specfacts.webidl.builder import ReportBuilder
from specfacts.webidl.types import WELL_KNOWN_TYPES, resolve_arguments, resolve_type

logger = logging.getLogger(__name__)

_TYPED_MEMBERS = frozenset({NodeKind.ATTRIBUTE, NodeKind.CONST, NodeKind.FIELD})

_COLLECTION_MEMBERS = frozenset({
    NodeKind.ITERABLE,
    NodeKind.ASYNC_ITERABLE,
    NodeKind.MAPLIKE,
    NodeKind.SETLIKE,
})


def walk_members(
    node: IdlNode,
    owner: str,
    builder: ReportBuilder,
    well_known: frozenset[str] = WELL_KNOWN_TYPES,
) -> None:
    """Resolve every member type of *node* with *owner* as the dependent name."""
    for member in node.members:
        kind = member.kind
        if kind in _TYPED_MEMBERS:
            resolve_type(member.idl_type, owner, builder, well_known)
        elif kind == NodeKind.OPERATION:
            # Stringifiers have no type worth tracking.
            if member.special == "stringifier":
                continue
            resolve_type(member.idl_type, owner, builder, well_known)
            resolve_arguments(member.arguments, owner, builder, well_known)
        elif kind == NodeKind.CONSTRUCTOR:
            resolve_arguments(member.arguments, owner, builder, well_known)
        elif kind in _COLLECTION_MEMBERS:
            for idl_type in member.type_args:
                resolve_type(idl_type, owner, builder, well_known)
            resolve_arguments(member.arguments, owner, builder, well_known)
        elif kind == NodeKind.ENUM_VALUE:
            # Matched downstream by literal text, see IdlNode.matching_texts.
            continue
        else:
            logger.debug("Skipping %s member of %s", kind, owner)
