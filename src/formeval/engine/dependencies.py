# Copyright 2026 formeval Contributors
# SPDX-License-Identifier: Apache-2.0

"""Dependency graph between derived fields and the fields they read."""

from __future__ import annotations

from formeval.model.fields import FormSchema

# ###############
# Public Interface
# ###############


def dependency_graph(schema: FormSchema) -> dict[str, list[str]]:
    """Return the adjacency list from each derived field to its parent ids.

    Only derived fields with derived logic appear as keys. Parent ids are
    listed as declared, including ids that do not exist in the schema.
    """
    return {f.id: list(f.derived_logic.parent_fields) for f in schema.derived_fields() if f.derived_logic}


def dependency_order(schema: FormSchema) -> list[str]:
    """Return derived field ids ordered so that parents come before children.

    Ties are broken by the fields' ``order`` position. Fields caught in a
    dependency cycle cannot be ordered; they are appended at the end in
    ``order`` sequence so that every derived field is still visited.
    """
    graph = dependency_graph(schema)
    position = {f.id: index for index, f in enumerate(schema.ordered_fields())}

    # Only edges between derived fields constrain the order.
    pending: dict[str, set[str]] = {
        node: {p for p in parents if p in graph and p != node} for node, parents in graph.items()
    }
    self_loops = {node for node, parents in graph.items() if node in parents}
    result: list[str] = []

    ready = sorted((n for n, deps in pending.items() if not deps and n not in self_loops), key=position.__getitem__)
    while ready:
        node = ready.pop(0)
        result.append(node)
        del pending[node]
        released = [n for n, deps in pending.items() if node in deps]
        for n in released:
            pending[n].discard(node)
            if not pending[n] and n not in self_loops:
                ready.append(n)
        ready.sort(key=position.__getitem__)

    result.extend(sorted(pending, key=position.__getitem__))
    return result


def detect_cycle(graph: dict[str, list[str]]) -> list[str] | None:
    """Return one dependency cycle among derived fields, or None.

    Args:
        graph: Mapping from each derived field id to the ids it reads, as
            returned by :func:`dependency_graph`. Ids that only appear as
            parents are plain inputs and end a chain.

    Returns:
        The chain of ids walked from the first derived field on the cycle
        back to itself, e.g. ``["total", "tax", "total"]`` when ``total``
        reads ``tax`` and ``tax`` reads ``total``. A field that reads itself
        gives ``["total", "total"]``. None if every chain ends at an input.
    """
    finished: set[str] = set()
    chain: list[str] = []
    chain_index: dict[str, int] = {}

    def _walk(field_id: str) -> list[str] | None:
        chain_index[field_id] = len(chain)
        chain.append(field_id)
        for parent_id in graph.get(field_id, []):
            if parent_id in chain_index:
                return chain[chain_index[parent_id] :] + [parent_id]
            if parent_id not in finished:
                found = _walk(parent_id)
                if found is not None:
                    return found
        chain.pop()
        del chain_index[field_id]
        finished.add(field_id)
        return None

    for field_id in graph:
        if field_id not in finished:
            found = _walk(field_id)
            if found is not None:
                return found
    return None
