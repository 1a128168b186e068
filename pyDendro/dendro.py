from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Any, Dict, Optional, Tuple

import numpy as np
import pandas as pd

from .frame import FittedTree, ensure_tree
from .layout import PositionOracle, resolve_positions, tree_coordinates
from .tree import LEAF
from .utils import match, parent_ids

logger = logging.getLogger(__name__)

ROUNDING_RULES = ("half_even", "half_up")


@dataclass(frozen=True)
class DendroData:
    """Plot-ready tables extracted from a tree.

    ``segments`` has columns ``x, y, xend, yend, n``; ``labels`` and
    ``leaf_labels`` have columns ``x, y, label``.
    """

    segments: pd.DataFrame
    labels: pd.DataFrame
    leaf_labels: pd.DataFrame
    kind: str = "tree"


def _round_half_up(value: float, digits: int) -> float:
    if not np.isfinite(value):
        return value
    exact = Decimal(repr(float(value)))
    if exact.as_tuple().exponent >= -digits:
        return float(value)
    with localcontext() as ctx:
        # Large magnitudes need more than the default 28 significant digits.
        ctx.prec = max(ctx.prec, exact.adjusted() + digits + 2)
        return float(exact.quantize(Decimal(1).scaleb(-digits), rounding=ROUND_HALF_UP))


def _round_half_even(value: float, digits: int) -> float:
    if not np.isfinite(value):
        return value
    # Builtin round is correctly rounded on the exact binary value.
    return round(float(value), digits)


class TreeLayoutExtractor:
    """Turn a fitted binary tree into segment and label tables.

    Parameters
    ----------
    digits : int
        Decimal places kept for numeric leaf values.
    rounding : {'half_even', 'half_up'}
        'half_even' rounds the exact stored binary value, ties to even
        (1.005 -> 1.0, 2.675 -> 2.67, 0.125 -> 0.12). 'half_up' rounds
        the shortest decimal representation away from zero on ties
        (1.005 -> 1.01, 2.675 -> 2.68).
    uniform : Optional[bool]
        Height rule of the default layout; see ``tree_coordinates``.
        Ignored when positions are injected.
    leaf_sentinel : str
        Value of ``var`` that marks a leaf.
    """

    def __init__(
        self,
        digits: int = 2,
        rounding: str = "half_even",
        uniform: Optional[bool] = None,
        leaf_sentinel: str = LEAF,
    ) -> None:
        if rounding not in ROUNDING_RULES:
            raise ValueError(f"rounding must be one of {ROUNDING_RULES}, got {rounding!r}")
        self.digits = digits
        self.rounding = rounding
        self.uniform = uniform
        self.leaf_sentinel = leaf_sentinel

    def _prepare(
        self, model, positions: Optional[PositionOracle]
    ) -> Tuple[FittedTree, np.ndarray, np.ndarray]:
        tree = ensure_tree(model, self.leaf_sentinel)
        oracle = positions if positions is not None else tree.positions
        if oracle is None:
            x, y = tree_coordinates(tree, uniform=self.uniform, leaf_sentinel=self.leaf_sentinel)
        else:
            logger.debug("Using injected positions (%s)", type(oracle).__name__)
            x, y = resolve_positions(oracle, tree.node_ids)
        return tree, x, y

    def compute_segments(self, model, positions: Optional[PositionOracle] = None) -> pd.DataFrame:
        """Vertical then horizontal connector segments for every non-root node."""
        tree, x, y = self._prepare(model, positions)
        return self._segments(tree, x, y)

    def compute_labels(
        self, model, positions: Optional[PositionOracle] = None
    ) -> Tuple[pd.DataFrame, pd.DataFrame]:
        """Split-variable labels for internal nodes and value labels for leaves."""
        tree, x, y = self._prepare(model, positions)
        return self._labels(tree, x, y)

    def extract(self, model, positions: Optional[PositionOracle] = None) -> DendroData:
        tree, x, y = self._prepare(model, positions)
        labels, leaf_labels = self._labels(tree, x, y)
        return DendroData(
            segments=self._segments(tree, x, y),
            labels=labels,
            leaf_labels=leaf_labels,
        )

    def _segments(self, tree: FittedTree, x: np.ndarray, y: np.ndarray) -> pd.DataFrame:
        node = tree.node_ids
        n = tree.frame["n"].to_numpy()
        child = np.nonzero(node != 1)[0]
        parent = match(parent_ids(node[child]), node)

        vertical = pd.DataFrame(
            {"x": x[child], "y": y[child], "xend": x[child], "yend": y[parent], "n": n[child]}
        )
        horizontal = pd.DataFrame(
            {"x": x[parent], "y": y[parent], "xend": x[child], "yend": y[parent], "n": n[child]}
        )
        segments = pd.concat([vertical, horizontal], ignore_index=True)
        logger.debug("Extracted %d segments from %d nodes", len(segments), len(node))
        return segments

    def _labels(
        self, tree: FittedTree, x: np.ndarray, y: np.ndarray
    ) -> Tuple[pd.DataFrame, pd.DataFrame]:
        frame = tree.frame
        leaf = tree.is_leaf(self.leaf_sentinel)

        labels = pd.DataFrame(
            {"x": x[~leaf], "y": y[~leaf], "label": frame["var"].to_numpy()[~leaf]}
        )

        yval = frame["yval"][leaf].reset_index(drop=True)
        if pd.api.types.is_numeric_dtype(yval) and not pd.api.types.is_bool_dtype(yval):
            yval = self._round(yval.astype(float))
        leaf_labels = pd.DataFrame({"x": x[leaf], "y": y[leaf], "label": yval})

        logger.debug("Extracted %d labels and %d leaf labels", len(labels), len(leaf_labels))
        return labels, leaf_labels

    def _round(self, values: pd.Series) -> pd.Series:
        if self.rounding == "half_up":
            return values.map(lambda v: _round_half_up(v, self.digits))
        return values.map(lambda v: _round_half_even(v, self.digits))

    def get_params(self, deep: bool = True) -> Dict[str, Any]:
        return {
            "digits": self.digits,
            "rounding": self.rounding,
            "uniform": self.uniform,
            "leaf_sentinel": self.leaf_sentinel,
        }

    def set_params(self, **params) -> "TreeLayoutExtractor":
        for key, value in params.items():
            if key not in self.get_params():
                raise ValueError(f"Unknown parameter {key}")
            if key == "rounding" and value not in ROUNDING_RULES:
                raise ValueError(f"rounding must be one of {ROUNDING_RULES}, got {value!r}")
            setattr(self, key, value)
        return self


def dendro_data(model, positions: Optional[PositionOracle] = None, **params) -> DendroData:
    """Extract segments, labels and leaf labels from a fitted tree in one call."""
    return TreeLayoutExtractor(**params).extract(model, positions=positions)


def tree_segments(model, positions: Optional[PositionOracle] = None, **params) -> pd.DataFrame:
    return TreeLayoutExtractor(**params).compute_segments(model, positions=positions)


def tree_labels(
    model, positions: Optional[PositionOracle] = None, **params
) -> Tuple[pd.DataFrame, pd.DataFrame]:
    return TreeLayoutExtractor(**params).compute_labels(model, positions=positions)


def segment(data: DendroData) -> pd.DataFrame:
    return data.segments


def label(data: DendroData) -> pd.DataFrame:
    return data.labels


def leaf_label(data: DendroData) -> pd.DataFrame:
    return data.leaf_labels
