"""
Resolve a column path against the flat schema list.

The footer stores the schema tree flattened in depth-first pre-order, with
each group recording only how many children follow it. Ancestry is rebuilt
with a stack of frames, one per open group, each tracking how many of that
group's children are still to come.
"""

import logging

from dataclasses import dataclass

from .types import SchemaElement

logger = logging.getLogger(__name__)


@dataclass
class _Frame:
    index: int
    remaining: int


def _normalize(path: list[str] | str) -> list[str]:
    if isinstance(path, str):
        return [segment for segment in path.split('.') if segment]
    return list(path)


def _iter_lineages(schema: list[SchemaElement]):
    """Yield the lineage (schema indices, root excluded) of each element."""
    stack: list[_Frame] = []
    for index in range(1, len(schema)):
        while stack:
            if stack[-1].remaining > 0:
                stack[-1].remaining -= 1
                break
            stack.pop()

        lineage = [frame.index for frame in stack] + [index]
        yield lineage

        element = schema[index]
        if element.child_count > 0:
            stack.append(_Frame(index=index, remaining=element.child_count))


def resolve_schema_lineage(
    schema: list[SchemaElement],
    path: list[str] | str,
) -> list[SchemaElement]:
    """
    Find a column's schema element together with its ancestors.

    Args:
        schema: Flat pre-order schema list; index 0 is the root and is never
            matched
        path: Column path as a list of names or a dotted string

    Returns:
        The ancestors outermost first, ending with the matched element. When
        only the last path segment matched, just that element. Empty when
        nothing matched.
    """
    segments = [s.lower() for s in _normalize(path)]
    if not segments or len(schema) < 2:
        return []

    for lineage in _iter_lineages(schema):
        if len(lineage) != len(segments):
            continue
        names = [schema[i].name.lower() for i in lineage]
        if names == segments:
            return [schema[i] for i in lineage]

    # Fall back to the leaf name alone
    leaf_name = segments[-1]
    for element in schema[1:]:
        if element.name.lower() == leaf_name:
            logger.debug(
                'Path %s matched only by its last segment %r',
                '.'.join(segments),
                element.name,
            )
            return [element]

    return []


def find_schema_element(
    schema: list[SchemaElement],
    path: list[str] | str,
) -> SchemaElement | None:
    """Return the schema element for a column path, or None if not found."""
    lineage = resolve_schema_lineage(schema, path)
    return lineage[-1] if lineage else None
