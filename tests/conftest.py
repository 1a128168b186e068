import matplotlib

matplotlib.use("Agg")

import pandas as pd
import pytest

from pyDendro import LEAF


@pytest.fixture
def stump():
    """Root split on ``a`` with two numeric leaves."""
    return pd.DataFrame(
        {"var": ["a", LEAF, LEAF], "n": [10, 6, 4], "yval": [2.7, 3.14159, 2.0], "dev": [10.0, 3.0, 4.0]},
        index=[1, 2, 3],
    )


@pytest.fixture
def five_nodes():
    """Root on ``a``, left child on ``b``; rows in preorder 1, 2, 4, 5, 3."""
    return pd.DataFrame(
        {
            "var": ["a", "b", LEAF, LEAF, LEAF],
            "n": [20, 12, 5, 7, 8],
            "yval": [1.0, 0.5, 0.125, 1.005, 2.675],
        },
        index=[1, 2, 4, 5, 3],
    )
