from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

import numpy as np
import pandas as pd

from .frame import FittedTree
from .tree import LEAF
from .utils import InvalidInputKind

# scikit-learn's marker for "no child" in children_left / children_right.
_TREE_LEAF = -1


def from_sklearn(
    estimator,
    feature_names: Optional[Sequence[str]] = None,
    leaf_sentinel: str = LEAF,
) -> FittedTree:
    """Build a ``FittedTree`` from a fitted scikit-learn decision tree.

    scikit-learn stores nodes in depth-first order with arbitrary integer
    indices; they are renumbered with binary-heap ids so the parent of node
    ``i`` is ``i // 2``. Only single-output trees are supported.

    ``dev`` is the node impurity weighted by its sample count (the node
    SSE for squared-error regressors), which feeds the proportional layout.
    """
    tree = getattr(estimator, "tree_", None)
    if tree is None:
        raise InvalidInputKind(f"{type(estimator).__name__} is not fitted (no tree_).")
    if tree.n_outputs != 1:
        raise InvalidInputKind("Multi-output trees are not supported.")

    if feature_names is None:
        names_in = getattr(estimator, "feature_names_in_", None)
        feature_names = list(names_in) if names_in is not None else None
    classes = getattr(estimator, "classes_", None)

    left = tree.children_left
    right = tree.children_right
    rows: List[Dict[str, Any]] = []
    ids: List[int] = []

    # Explicit stack keeps preorder without recursion limits on deep trees.
    stack = [(0, 1)]
    while stack:
        idx, heap_id = stack.pop()
        is_leaf = left[idx] == _TREE_LEAF
        if is_leaf:
            var = leaf_sentinel
        else:
            j = int(tree.feature[idx])
            var = feature_names[j] if feature_names is not None else f"x{j}"

        value = tree.value[idx][0]
        if classes is not None:
            yval = classes[int(np.argmax(value))]
        else:
            yval = float(value[0])

        n = int(tree.n_node_samples[idx])
        ids.append(heap_id)
        rows.append({"var": var, "n": n, "yval": yval, "dev": float(tree.impurity[idx]) * n})
        if not is_leaf:
            stack.append((int(right[idx]), 2 * heap_id + 1))
            stack.append((int(left[idx]), 2 * heap_id))

    frame = pd.DataFrame(rows, index=pd.Index(ids, name="node"))
    if classes is not None:
        # Integer class labels are still categories, never rounded.
        frame["yval"] = pd.Categorical(frame["yval"], categories=list(classes))
    return FittedTree(frame=frame)
