from abc import ABC, abstractmethod
from typing import Any, Dict, Iterator, List, Optional, Tuple

from exceptions import MissingFeatureError
from features import FeatureVector


def iter_preorder(root: 'TreeNode') -> Iterator['TreeNode']:
    """
    Yield every node of a tree in pre-order (node, left subtree, right subtree).

    Args:
        root (TreeNode): Root of the tree

    Returns:
        Iterator[TreeNode]: Nodes in pre-order
    """
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        if not node.is_leaf:
            stack.append(node.right)
            stack.append(node.left)


class TreeNode(ABC):
    """
    Node in a classification tree.

    A node is either a LabelNode (a leaf holding the predicted label) or a
    DecisionNode (a feature/threshold test with exactly two children).

    Subtree utilities walk the tree with an explicit stack, so trees grown
    into long chains are handled at any depth.
    """

    is_leaf: bool = False

    @abstractmethod
    def predict_single(self, sample: FeatureVector) -> str:
        """
        Predict the label for a single sample by traversing the subtree.

        Args:
            sample (FeatureVector): Item to classify

        Returns:
            str: Predicted label
        """

    @abstractmethod
    def _json_fields(self) -> Dict[str, Any]:
        """JSON fields of this node alone, without children."""

    @abstractmethod
    def _print_line(self) -> str:
        """Text shown for this node by print_tree()."""

    def to_json(self) -> Dict[str, Any]:
        """
        Convert the subtree to a JSON-serializable dictionary.

        Returns:
            Dict[str, Any]: JSON representation of the subtree
        """
        result = self._json_fields()
        stack: List[Tuple[TreeNode, Dict[str, Any]]] = [(self, result)]
        while stack:
            node, node_dict = stack.pop()
            if node.is_leaf:
                continue
            for key, child in (('left_child', node.left), ('right_child', node.right)):
                child_dict = child._json_fields()
                node_dict[key] = child_dict
                stack.append((child, child_dict))
        return result

    def get_leaf_count(self) -> int:
        """Number of LabelNodes in the subtree."""
        return sum(1 for node in iter_preorder(self) if node.is_leaf)

    def get_node_count(self) -> int:
        """Total number of nodes in the subtree."""
        return sum(1 for _ in iter_preorder(self))

    def get_max_depth(self, depth: int = 0) -> int:
        """
        Get the maximum depth of the subtree rooted at this node.

        Args:
            depth (int): Depth of this node (root = 0)

        Returns:
            int: Maximum depth
        """
        max_depth = depth
        stack = [(self, depth)]
        while stack:
            node, node_depth = stack.pop()
            max_depth = max(max_depth, node_depth)
            if not node.is_leaf:
                stack.append((node.right, node_depth + 1))
                stack.append((node.left, node_depth + 1))
        return max_depth

    def print_tree(self, indent: int = 0, prefix: str = "Root: ") -> None:
        """
        Print a visual representation of the subtree.

        Args:
            indent (int): Current indentation level
            prefix (str): Prefix for this node
        """
        stack = [(self, indent, prefix)]
        while stack:
            node, node_indent, node_prefix = stack.pop()
            print(f"{'  ' * node_indent}{node_prefix}{node._print_line()}")
            if not node.is_leaf:
                stack.append((node.right, node_indent + 1, "└─ False: "))
                stack.append((node.left, node_indent + 1, "├─ True:  "))

    def __eq__(self, other) -> bool:
        if not isinstance(other, TreeNode):
            return NotImplemented

        # Exemplars are training state, not part of the tree
        pairs = [(self, other)]
        while pairs:
            ours, theirs = pairs.pop()
            if ours.is_leaf != theirs.is_leaf:
                return False
            if ours.is_leaf:
                if ours.label != theirs.label:
                    return False
            else:
                if ours.feature != theirs.feature or ours.threshold != theirs.threshold:
                    return False
                pairs.append((ours.right, theirs.right))
                pairs.append((ours.left, theirs.left))
        return True

    __hash__ = None

    def __repr__(self) -> str:
        return self.__str__()


class LabelNode(TreeNode):
    """
    Leaf node holding a label.

    `exemplar` is the training vector that created the leaf. It is only used
    to split the leaf later and is None for leaves read from a saved tree.
    """

    is_leaf = True

    def __init__(self, label: str, exemplar: Optional[FeatureVector] = None):
        self.label = label
        self.exemplar = exemplar

    def predict_single(self, sample: FeatureVector) -> str:
        return self.label

    def _json_fields(self) -> Dict[str, Any]:
        return {'type': 'leaf', 'label': self.label}

    def _print_line(self) -> str:
        return f"LABEL: {self.label}"

    def __str__(self) -> str:
        return f"LabelNode(label={self.label!r})"


class DecisionNode(TreeNode):
    """
    Internal node testing one feature against a threshold.

    Samples whose value is strictly below the threshold go left, all others go
    right.
    """

    def __init__(self, feature: str, threshold: float,
                 left: Optional[TreeNode] = None, right: Optional[TreeNode] = None):
        self.feature = feature
        self.threshold = threshold
        self.left = left
        self.right = right

    def goes_left(self, sample: FeatureVector) -> bool:
        """
        Check which branch a sample takes at this node.

        Args:
            sample (FeatureVector): Sample being routed

        Returns:
            bool: True if the sample's value is below the threshold (go left)

        Raises:
            MissingFeatureError: If the sample lacks this node's feature
        """
        if not sample.contains_feature(self.feature):
            raise MissingFeatureError(self.feature)
        return sample.get(self.feature) < self.threshold

    def predict_single(self, sample: FeatureVector) -> str:
        node: TreeNode = self
        while not node.is_leaf:
            node = node.left if node.goes_left(sample) else node.right
        return node.label

    def _json_fields(self) -> Dict[str, Any]:
        return {'type': 'decision', 'feature': self.feature, 'threshold': self.threshold}

    def _print_line(self) -> str:
        return f"{self.feature} < {self.threshold!r}"

    def __str__(self) -> str:
        return f"DecisionNode(feature={self.feature!r}, threshold={self.threshold!r})"
