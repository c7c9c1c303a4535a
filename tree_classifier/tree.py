from typing import Any, Dict, List, Optional, Sequence, TextIO
import time

from builder import insert
from exceptions import InvalidArgumentError, InvalidStateError
from features import FeatureVector
from nodes import TreeNode, iter_preorder
from persistence import check_label, load_tree, save_tree

OVERALL = "Overall"


class Classifier:
    """
    Incrementally trained decision tree classifier.

    Predicts a label (e.g. "spam" or "ham") for a FeatureVector. The tree is
    grown one labeled example at a time: an example that disagrees with the
    leaf it reaches splits that leaf on the feature where the two examples
    differ the most. The tree can be saved to and loaded from a pre-order text
    format.
    """

    def __init__(self, root: Optional[TreeNode] = None, verbose: bool = False):
        """
        Initialize the classifier.

        Args:
            root (TreeNode, optional): Existing tree to classify with
            verbose (bool): Print training summaries
        """
        self.root: Optional[TreeNode] = root
        self.verbose = verbose

        # Training metadata
        self.n_examples: int = 0
        self.training_time: float = 0.0

    @classmethod
    def from_training_data(cls, data: Sequence[FeatureVector], labels: Sequence[str],
                           verbose: bool = False) -> 'Classifier':
        """
        Build a classifier by folding in every (data, label) pair in order.

        Raises:
            InvalidArgumentError: If either sequence is None or empty, or their
                                  lengths differ
        """
        return cls(verbose=verbose).fit(data, labels)

    @classmethod
    def load(cls, input_stream: TextIO, verbose: bool = False) -> 'Classifier':
        """
        Build a classifier from a tree previously written by save().

        Args:
            input_stream (TextIO): Stream holding the saved tree
            verbose (bool): Print training summaries

        Returns:
            Classifier: Classifier owning the loaded tree

        Raises:
            InvalidArgumentError: If input_stream is None
            TreeParseError: If the stream does not hold a valid tree
        """
        if input_stream is None:
            raise InvalidArgumentError("input cannot be None")
        classifier = cls(load_tree(input_stream), verbose=verbose)
        if verbose:
            print(f"Loaded tree: {classifier.node_count} nodes, {classifier.leaf_count} leaves, "
                  f"max depth {classifier.max_depth}")
        return classifier

    def fit(self, data: Sequence[FeatureVector], labels: Sequence[str]) -> 'Classifier':
        """
        Train a new tree from scratch.

        Args:
            data (Sequence[FeatureVector]): Training items
            labels (Sequence[str]): Label of each item, at the same index

        Returns:
            Classifier: Fitted classifier (self)

        Raises:
            InvalidArgumentError: If either sequence is None or empty, their
                                  lengths differ, or an item or label is invalid
        """
        if data is None or labels is None:
            raise InvalidArgumentError("Neither data nor labels can be None")
        if len(data) != len(labels):
            raise InvalidArgumentError(
                f"Length of provided data [{len(data)}] doesn't match provided labels [{len(labels)}]"
            )
        if len(data) == 0:
            raise InvalidArgumentError("Neither data nor labels can be empty")

        for item, label in zip(data, labels):
            self._check_example(item, label)

        if self.verbose:
            print(f"Training tree on {len(data)} examples...")
        start_time = time.time()

        root = None
        for item, label in zip(data, labels):
            root = insert(root, item, label)
        self.root = root

        self.n_examples = len(data)
        self.training_time = time.time() - start_time

        if self.verbose:
            print(f"Training completed in {self.training_time:.3f}s")
            print(f"Tree: {self.node_count} nodes, {self.leaf_count} leaves, max depth {self.max_depth}")

        return self

    def partial_fit(self, data: FeatureVector, label: str) -> 'Classifier':
        """
        Fold one more labeled example into the current tree.

        Args:
            data (FeatureVector): Training item
            label (str): Its label

        Returns:
            Classifier: self

        Raises:
            InvalidArgumentError: If the item or label is invalid
            InvalidStateError: If the example conflicts with a leaf that was
                               loaded from a file and so has no training example
        """
        self._check_example(data, label)
        start_time = time.time()
        self.root = insert(self.root, data, label)
        self.n_examples += 1
        self.training_time += time.time() - start_time
        return self

    @staticmethod
    def _check_example(data: FeatureVector, label: str) -> None:
        if not isinstance(data, FeatureVector):
            raise InvalidArgumentError(f"Training items must be FeatureVectors, got {type(data).__name__}")
        check_label(label)

    def _require_root(self) -> TreeNode:
        if self.root is None:
            raise InvalidStateError("Classifier not trained. Call fit() or load() first.")
        return self.root

    def classify(self, item: FeatureVector) -> str:
        """
        Predict the label of one item.

        Args:
            item (FeatureVector): Item to classify

        Returns:
            str: Predicted label

        Raises:
            InvalidArgumentError: If item is None
            InvalidStateError: If the classifier has no tree
            MissingFeatureError: If a decision on the item's path tests a
                                 feature the item lacks
        """
        if item is None:
            raise InvalidArgumentError("Input cannot be None")
        return self._require_root().predict_single(item)

    def predict(self, items: Sequence[FeatureVector]) -> List[str]:
        """
        Predict labels for several items.

        Args:
            items (Sequence[FeatureVector]): Items to classify

        Returns:
            List[str]: Predicted labels, in order
        """
        if items is None:
            raise InvalidArgumentError("items cannot be None")
        return [self.classify(item) for item in items]

    def save(self, output: TextIO) -> int:
        """
        Write the tree to a text stream in pre-order.

        Args:
            output (TextIO): Stream to write to

        Returns:
            int: Number of nodes written

        Raises:
            InvalidArgumentError: If output is None
            InvalidStateError: If the classifier has no tree
        """
        if output is None:
            raise InvalidArgumentError("output cannot be None")
        return save_tree(self._require_root(), output)

    def score(self, data: Sequence[FeatureVector], labels: Sequence[str]) -> Dict[str, float]:
        """
        Calculate classification accuracy on labeled data.

        Totals are counted per expected label, correct answers per predicted
        label. Only labels predicted correctly at least once appear in the
        result, along with the "Overall" key.

        Args:
            data (Sequence[FeatureVector]): Items to classify
            labels (Sequence[str]): Expected label of each item

        Returns:
            Dict[str, float]: Accuracy in [0, 1] per label plus "Overall"

        Raises:
            InvalidArgumentError: If either sequence is None or empty, or their
                                  lengths differ
        """
        if data is None or labels is None:
            raise InvalidArgumentError("Neither data nor labels can be None")
        if len(data) != len(labels):
            raise InvalidArgumentError(
                f"Length of provided data [{len(data)}] doesn't match provided labels [{len(labels)}]"
            )
        if len(data) == 0:
            raise InvalidArgumentError("Neither data nor labels can be empty")

        label_to_total: Dict[str, int] = {OVERALL: 0}
        label_to_correct: Dict[str, float] = {OVERALL: 0.0}

        for item, label in zip(data, labels):
            result = self.classify(item)

            label_to_total[label] = label_to_total.get(label, 0) + 1
            label_to_total[OVERALL] += 1
            if result == label:
                label_to_correct[result] = label_to_correct.get(result, 0.0) + 1
                label_to_correct[OVERALL] += 1

        return {label: correct / label_to_total[label] for label, correct in label_to_correct.items()}

    @property
    def node_count(self) -> int:
        return self.root.get_node_count() if self.root is not None else 0

    @property
    def leaf_count(self) -> int:
        return self.root.get_leaf_count() if self.root is not None else 0

    @property
    def max_depth(self) -> int:
        return self.root.get_max_depth() if self.root is not None else 0

    def get_feature_usage(self) -> Dict[str, int]:
        """
        Count how many decision nodes test each feature.

        Returns:
            Dict[str, int]: Feature -> number of decision nodes, in pre-order of
                            first use
        """
        if self.root is None:
            return {}

        usage: Dict[str, int] = {}
        for node in iter_preorder(self.root):
            if not node.is_leaf:
                usage[node.feature] = usage.get(node.feature, 0) + 1
        return usage

    def to_json(self) -> Dict[str, Any]:
        """
        Convert the classifier to a JSON-serializable dictionary.

        Returns:
            Dict[str, Any]: Summary statistics and the tree (None if untrained)
        """
        return {
            'trained': self.root is not None,
            'n_examples': self.n_examples,
            'node_count': self.node_count,
            'leaf_count': self.leaf_count,
            'max_depth': self.max_depth,
            'tree': self.root.to_json() if self.root is not None else None,
        }

    def print_tree(self) -> None:
        """Print a visual representation of the tree."""
        if self.root is None:
            print("Tree not trained.")
            return

        print(f"\nClassification Tree (examples={self.n_examples}):")
        print(f"Nodes: {self.node_count}, Leaves: {self.leaf_count}, Max depth: {self.max_depth}")
        print("-" * 80)
        self.root.print_tree()
        print("-" * 80)

    def __str__(self) -> str:
        return f"Classifier(nodes={self.node_count}, leaves={self.leaf_count}, trained={self.root is not None})"
