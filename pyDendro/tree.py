from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import pandas as pd

from .utils import InvalidInputKind

LEAF = "<leaf>"


@dataclass
class Node:
    """A binary tree node carrying what a plot needs: split, value and size."""

    n_samples: int
    value: Any
    feature_name: Optional[str] = None
    dev: Optional[float] = None
    left: Optional["Node"] = None
    right: Optional["Node"] = None
    _id: int = field(default=0, repr=False)

    @property
    def is_leaf(self) -> bool:
        return self.left is None and self.right is None


def assign_node_ids(node: Node, node_id: int = 1) -> None:
    """Number nodes the binary-heap way: children of ``i`` are ``2i`` and ``2i+1``."""
    node._id = node_id
    if node.left:
        assign_node_ids(node.left, 2 * node_id)
    if node.right:
        assign_node_ids(node.right, 2 * node_id + 1)


def _collect_rows(
    node: Node, rows: List[Dict[str, Any]], ids: List[int], leaf_sentinel: str
) -> None:
    if node.is_leaf:
        var = leaf_sentinel
    else:
        if node.left is None or node.right is None:
            raise InvalidInputKind(f"Node {node._id} has a single child; splits must be binary.")
        var = node.feature_name or f"node{node._id}"
    ids.append(node._id)
    rows.append({"var": var, "n": node.n_samples, "yval": node.value, "dev": node.dev})
    if node.left:
        _collect_rows(node.left, rows, ids, leaf_sentinel)
    if node.right:
        _collect_rows(node.right, rows, ids, leaf_sentinel)


def to_frame(root: Node, leaf_sentinel: str = LEAF) -> pd.DataFrame:
    """Flatten a ``Node`` tree into a node table in depth-first preorder."""
    assign_node_ids(root)
    rows: List[Dict[str, Any]] = []
    ids: List[int] = []
    _collect_rows(root, rows, ids, leaf_sentinel)
    frame = pd.DataFrame(rows, index=pd.Index(ids, name="node"))
    if frame["dev"].isna().any():
        frame = frame.drop(columns="dev")
    return frame
