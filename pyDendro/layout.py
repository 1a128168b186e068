from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Callable, Optional, Tuple, Union

import numpy as np
import pandas as pd

from .frame import FittedTree
from .tree import LEAF
from .utils import InvalidInputKind, match, node_depth, parent_ids, sibling_ids

logger = logging.getLogger(__name__)

PositionOracle = Union[
    Callable[[int], Tuple[float, float]],
    Mapping,
    pd.DataFrame,
]


def tree_coordinates(
    tree: FittedTree, uniform: Optional[bool] = None, leaf_sentinel: str = LEAF
) -> Tuple[np.ndarray, np.ndarray]:
    """Classic tree-plot layout, returned as x and y arrays in row order.

    Leaves are spread 1, 2, ... from left to right in row order and each
    split sits halfway between its two children. Heights are either
    ``-depth`` (``uniform=True``) or proportional to the node deviance,
    so a split drops by the deviance it explains. ``uniform=None`` uses
    the deviance when the table has a ``dev`` column.
    """
    frame = tree.frame
    node = tree.node_ids
    depth = node_depth(node)
    leaf = tree.is_leaf(leaf_sentinel)

    if uniform is None:
        uniform = "dev" not in frame.columns
    if uniform:
        y = -depth.astype(float)
    else:
        if "dev" not in frame.columns:
            raise InvalidInputKind("Proportional layout needs a 'dev' column.")
        dev = frame["dev"].to_numpy(dtype=float)
        if np.any(np.isnan(dev)):
            raise InvalidInputKind("Proportional layout needs 'dev' for every node.")
        parent = match(parent_ids(node), node)
        sibling = match(sibling_ids(node), node)
        y = dev.copy()
        for level in range(1, int(depth.max()) + 1):
            i = np.nonzero(depth == level)[0]
            y[i] = y[parent[i]] - dev[parent[i]] + dev[i] + dev[sibling[i]]

    x = np.zeros(len(node), dtype=float)
    x[leaf] = np.arange(1, int(leaf.sum()) + 1, dtype=float)
    left = match(2 * node, node)
    right = match(2 * node + 1, node)
    for level in range(int(depth.max()), -1, -1):
        i = np.nonzero((depth == level) & ~leaf)[0]
        x[i] = 0.5 * (x[left[i]] + x[right[i]])

    logger.debug("Computed %s layout for %d nodes", "uniform" if uniform else "proportional", len(node))
    return x, y


def resolve_positions(oracle: PositionOracle, node_ids: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Look every node id up in an injected coordinate oracle."""
    node_ids = np.asarray(node_ids, dtype=np.int64)
    if isinstance(oracle, pd.DataFrame):
        if not {"x", "y"}.issubset(oracle.columns):
            raise InvalidInputKind("Position table needs 'x' and 'y' columns.")
        try:
            xy = oracle.loc[node_ids, ["x", "y"]]
        except KeyError as exc:
            raise InvalidInputKind(f"Position table does not cover every node: {exc}") from exc
        return xy["x"].to_numpy(dtype=float), xy["y"].to_numpy(dtype=float)

    if isinstance(oracle, Mapping):
        lookup = oracle.__getitem__
    elif callable(oracle):
        lookup = oracle
    else:
        raise InvalidInputKind(f"Unsupported position oracle: {type(oracle).__name__}.")

    x = np.empty(len(node_ids), dtype=float)
    y = np.empty(len(node_ids), dtype=float)
    for k, node_id in enumerate(node_ids.tolist()):
        try:
            x[k], y[k] = lookup(node_id)
        except KeyError as exc:
            raise InvalidInputKind(f"No position for node {node_id}.") from exc
        except (TypeError, ValueError) as exc:
            raise InvalidInputKind(f"Position for node {node_id} is not an (x, y) pair.") from exc
    return x, y
