from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

import numpy as np
import pandas as pd

from .tree import LEAF, Node, to_frame
from .utils import InvalidInputKind, match, parent_ids

REQUIRED_COLUMNS = ("var", "n", "yval")


@dataclass(frozen=True)
class FittedTree:
    """A fitted tree as seen by the extractor.

    Parameters
    ----------
    frame : pandas.DataFrame
        Node table indexed by binary-heap node id with columns ``var``,
        ``n``, ``yval`` and optionally ``dev``. Row order is kept.
    positions : optional
        Coordinate oracle (callable, mapping or x/y DataFrame keyed by id).
        When ``None`` the default layout is computed from ``frame``.
    """

    frame: pd.DataFrame
    positions: Optional[Any] = None

    @property
    def node_ids(self) -> np.ndarray:
        return self.frame.index.to_numpy(dtype=np.int64)

    def is_leaf(self, leaf_sentinel: str = LEAF) -> np.ndarray:
        return (self.frame["var"] == leaf_sentinel).to_numpy()


def _check_frame(frame: pd.DataFrame, leaf_sentinel: str) -> pd.DataFrame:
    missing = [col for col in REQUIRED_COLUMNS if col not in frame.columns]
    if missing:
        raise InvalidInputKind(f"Node table is missing required columns: {missing}")
    if len(frame) == 0:
        raise InvalidInputKind("Node table is empty.")

    if not pd.api.types.is_integer_dtype(frame.index.dtype):
        # Row names such as "1", "2", "3" are accepted.
        ids = pd.to_numeric(pd.Series(frame.index), errors="coerce")
        if ids.isna().any() or (ids % 1 != 0).any():
            raise InvalidInputKind("Node ids must be integers.")
        frame = frame.set_axis(pd.Index(ids.astype(np.int64), name=frame.index.name), axis=0)

    node = frame.index.to_numpy(dtype=np.int64)
    if np.any(node < 1):
        raise InvalidInputKind("Node ids must be positive (root = 1).")
    if frame.index.has_duplicates:
        raise InvalidInputKind("Node ids must be unique.")
    if 1 not in set(node.tolist()):
        raise InvalidInputKind("Node table has no root (id 1).")

    leaf = (frame["var"] == leaf_sentinel).to_numpy()
    non_root = node != 1
    parent = match(parent_ids(node), node)
    orphan = non_root & (parent < 0)
    if np.any(orphan):
        raise InvalidInputKind(f"Nodes without a parent: {node[orphan].tolist()}")
    from_leaf = non_root & leaf[np.where(parent < 0, 0, parent)]
    if np.any(from_leaf):
        raise InvalidInputKind(f"Nodes hanging under a leaf: {node[from_leaf].tolist()}")

    internal = ~leaf
    has_left = match(2 * node, node) >= 0
    has_right = match(2 * node + 1, node) >= 0
    incomplete = internal & ~(has_left & has_right)
    if np.any(incomplete):
        raise InvalidInputKind(f"Internal nodes missing a child: {node[incomplete].tolist()}")
    return frame


def ensure_tree(model, leaf_sentinel: str = LEAF) -> FittedTree:
    """Normalise any supported model into a validated ``FittedTree``."""
    positions = None
    if isinstance(model, FittedTree):
        frame, positions = model.frame, model.positions
    elif isinstance(model, pd.DataFrame):
        frame = model
    elif isinstance(model, Node):
        frame = to_frame(model, leaf_sentinel)
    elif hasattr(model, "tree_"):
        from .adapters import from_sklearn

        return ensure_tree(from_sklearn(model, leaf_sentinel=leaf_sentinel), leaf_sentinel)
    elif isinstance(getattr(model, "frame", None), pd.DataFrame):
        frame = model.frame
        positions = getattr(model, "positions", None)
    else:
        raise InvalidInputKind(
            f"Expected a node table or a fitted tree, got {type(model).__name__}."
        )
    return FittedTree(frame=_check_frame(frame, leaf_sentinel), positions=positions)
