import pandas as pd
import pytest

from pyDendro import LEAF, InvalidInputKind, Node, dendro_data, ensure_tree
from pyDendro.tree import assign_node_ids, to_frame


def _frame(var, index, **extra):
    data = {"var": var, "n": [1] * len(var), "yval": [0.0] * len(var)}
    data.update(extra)
    return pd.DataFrame(data, index=index)


def test_string_row_names_are_accepted():
    frame = _frame(["a", LEAF, LEAF], ["1", "2", "3"])
    tree = ensure_tree(frame)
    assert list(tree.node_ids) == [1, 2, 3]


def test_model_with_frame_attribute(stump):
    class Model:
        frame = stump

    data = dendro_data(Model())
    assert len(data.segments) == 4


@pytest.mark.parametrize(
    "model",
    [
        None,
        42,
        object(),
        [("a", 1)],
    ],
)
def test_rejects_models_without_node_table(model):
    with pytest.raises(InvalidInputKind):
        dendro_data(model)


def test_rejects_missing_columns(stump):
    with pytest.raises(InvalidInputKind, match="yval"):
        ensure_tree(stump.drop(columns="yval"))


def test_rejects_empty_table():
    with pytest.raises(InvalidInputKind):
        ensure_tree(pd.DataFrame({"var": [], "n": [], "yval": []}))


@pytest.mark.parametrize(
    "index",
    [
        ["root", "l", "r"],
        [1.0, 2.5, 3.0],
        [0, 2, 3],
        [1, 2, 2],
        [4, 8, 9],
    ],
)
def test_rejects_bad_ids(index):
    with pytest.raises(InvalidInputKind):
        ensure_tree(_frame(["a", LEAF, LEAF], index))


def test_rejects_orphan_node():
    with pytest.raises(InvalidInputKind, match="parent"):
        ensure_tree(_frame(["a", LEAF, LEAF, LEAF], [1, 2, 3, 12]))


def test_rejects_node_under_leaf():
    with pytest.raises(InvalidInputKind, match="leaf"):
        ensure_tree(_frame(["a", LEAF, LEAF, LEAF, LEAF], [1, 2, 4, 5, 3]))


def test_rejects_internal_node_missing_child():
    with pytest.raises(InvalidInputKind, match="child"):
        ensure_tree(_frame(["a", LEAF], [1, 2]))


def test_validation_happens_before_output():
    frame = _frame(["a", LEAF], [1, 2])
    with pytest.raises(InvalidInputKind):
        dendro_data(frame, positions={1: (0.0, 0.0), 2: (0.0, -1.0)})


def _small_tree():
    return Node(
        n_samples=10,
        value=2.7,
        feature_name="a",
        left=Node(n_samples=6, value=3.14159),
        right=Node(
            n_samples=4,
            value=2.0,
            feature_name="b",
            left=Node(n_samples=1, value=1.0),
            right=Node(n_samples=3, value=2.3333),
        ),
    )


def test_assign_node_ids_uses_heap_numbering():
    root = _small_tree()
    assign_node_ids(root)
    assert root._id == 1
    assert root.left._id == 2
    assert root.right._id == 3
    assert root.right.left._id == 6
    assert root.right.right._id == 7


def test_to_frame_preorder():
    frame = to_frame(_small_tree())
    assert list(frame.index) == [1, 2, 3, 6, 7]
    assert list(frame["var"]) == ["a", LEAF, "b", LEAF, LEAF]
    assert list(frame["n"]) == [10, 6, 4, 1, 3]
    assert "dev" not in frame.columns


def test_node_tree_is_accepted_directly():
    data = dendro_data(_small_tree())
    assert list(data.labels["label"]) == ["a", "b"]
    assert list(data.leaf_labels["label"]) == [3.14, 1.0, 2.33]
    assert len(data.segments) == 8


def test_node_with_single_child_is_rejected():
    root = Node(n_samples=2, value=1.0, feature_name="a", left=Node(n_samples=2, value=1.0))
    with pytest.raises(InvalidInputKind):
        dendro_data(root)


def test_node_tree_with_custom_leaf_sentinel():
    data = dendro_data(_small_tree(), leaf_sentinel="*")
    assert list(data.labels["label"]) == ["a", "b"]
    assert len(data.leaf_labels) == 3
    assert list(to_frame(_small_tree(), leaf_sentinel="*")["var"]) == ["a", "*", "b", "*", "*"]
