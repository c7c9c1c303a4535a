"""
Online tree construction.

Labeled examples are folded into the tree one at a time. An example that
reaches a leaf with the same label leaves the tree untouched; one that
reaches a leaf with a different label turns that leaf into a DecisionNode
separating the two examples on the feature where they differ the most, with
the threshold halfway between their values. Earlier splits are never revisited.
"""
from typing import Optional, Tuple

from exceptions import InvalidStateError
from features import FeatureVector
from nodes import DecisionNode, LabelNode, TreeNode


def midpoint(one: float, two: float) -> float:
    """
    Halfway point between two values, independent of their order.

    Args:
        one (float): First value
        two (float): Second value

    Returns:
        float: min(one, two) + |one - two| / 2
    """
    return min(one, two) + abs(one - two) / 2.0


def choose_split(data: FeatureVector, exemplar: FeatureVector) -> Tuple[str, float]:
    """
    Pick the feature and threshold that separate two conflicting examples.

    Args:
        data (FeatureVector): Incoming example
        exemplar (FeatureVector): Example stored in the conflicting leaf

    Returns:
        Tuple[str, float]: (feature, threshold)
    """
    feature = data.find_biggest_difference(exemplar)
    threshold = midpoint(data.get_or_default(feature), exemplar.get_or_default(feature))
    return feature, threshold


def split_leaf(leaf: LabelNode, data: FeatureVector, label: str) -> DecisionNode:
    """
    Replace a leaf with a DecisionNode separating it from a new example.

    The new example goes left when its value for the chosen feature is below
    the threshold, otherwise right; the existing leaf takes the other side.

    Args:
        leaf (LabelNode): Leaf whose label disagrees with `label`
        data (FeatureVector): Incoming example
        label (str): Label of the incoming example

    Returns:
        DecisionNode: New subtree root holding `leaf` and a new leaf for the example

    Raises:
        InvalidStateError: If the leaf has no exemplar (it was loaded from a file)
    """
    if leaf.exemplar is None:
        raise InvalidStateError(
            f"Cannot split leaf '{leaf.label}' for label '{label}': the leaf has no training example"
        )

    feature, threshold = choose_split(data, leaf.exemplar)
    new_leaf = LabelNode(label, data)

    if data.get_or_default(feature) < threshold:
        return DecisionNode(feature, threshold, left=new_leaf, right=leaf)
    return DecisionNode(feature, threshold, left=leaf, right=new_leaf)


def insert(root: Optional[TreeNode], data: FeatureVector, label: str) -> TreeNode:
    """
    Fold one labeled example into a tree.

    Decision nodes route the example by the same rule as classification,
    except that an example lacking a node's feature is sent left.

    Args:
        root (TreeNode, optional): Current tree, or None for an empty tree
        data (FeatureVector): Example to fold in
        label (str): Label of the example

    Returns:
        TreeNode: Root of the updated tree (a new node if the root was replaced)
    """
    if root is None:
        return LabelNode(label, data)

    parent: Optional[DecisionNode] = None
    went_left = False
    node = root
    while not node.is_leaf:
        parent = node
        if node.feature in data:
            went_left = data.get(node.feature) < node.threshold
        else:
            went_left = True
        node = node.left if went_left else node.right

    if node.label == label:
        return root

    replacement = split_leaf(node, data, label)
    if parent is None:
        return replacement
    if went_left:
        parent.left = replacement
    else:
        parent.right = replacement
    return root
