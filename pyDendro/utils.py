from __future__ import annotations

import numpy as np


class InvalidInputKind(ValueError):
    """Raised when a model does not carry a usable node table or layout."""


def node_depth(node: np.ndarray) -> np.ndarray:
    """Depth of each heap-numbered node (root = 1 has depth 0)."""
    node = np.asarray(node, dtype=np.int64)
    # floor(log2(id)) computed exactly on integers.
    depth = np.zeros(node.shape, dtype=np.int64)
    rest = node.copy()
    while np.any(rest > 1):
        mask = rest > 1
        depth[mask] += 1
        rest[mask] //= 2
    return depth


def parent_ids(node: np.ndarray) -> np.ndarray:
    return np.asarray(node, dtype=np.int64) // 2


def sibling_ids(node: np.ndarray) -> np.ndarray:
    node = np.asarray(node, dtype=np.int64)
    return np.where(node % 2 == 1, node - 1, node + 1)


def match(values: np.ndarray, table: np.ndarray) -> np.ndarray:
    """Row position of each value within ``table``, or -1 if absent."""
    table = np.asarray(table, dtype=np.int64)
    values = np.asarray(values, dtype=np.int64)
    if len(table) == 0:
        return np.full(values.shape, -1, dtype=np.int64)
    order = np.argsort(table, kind="mergesort")
    sorted_table = table[order]
    pos = np.clip(np.searchsorted(sorted_table, values), 0, len(table) - 1)
    found = sorted_table[pos] == values
    return np.where(found, order[pos], -1)
