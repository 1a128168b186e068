"""pyDendro: plot-ready tables from fitted decision trees.

Extracts the line segments and text labels of a binary tree's classic
plot layout as pandas DataFrames, so any plotting library can draw them.
"""

from .adapters import from_sklearn
from .dendro import (
    DendroData,
    TreeLayoutExtractor,
    dendro_data,
    leaf_label,
    label,
    segment,
    tree_labels,
    tree_segments,
)
from .frame import FittedTree, ensure_tree
from .layout import resolve_positions, tree_coordinates
from .tree import LEAF, Node
from .utils import InvalidInputKind

__all__ = [
    "DendroData",
    "FittedTree",
    "InvalidInputKind",
    "LEAF",
    "Node",
    "TreeLayoutExtractor",
    "dendro_data",
    "ensure_tree",
    "from_sklearn",
    "label",
    "leaf_label",
    "resolve_positions",
    "segment",
    "tree_coordinates",
    "tree_labels",
    "tree_segments",
]
