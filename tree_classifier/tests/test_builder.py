import unittest
import sys
import os

# Add the parent directory to the path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from builder import choose_split, insert, midpoint, split_leaf
from exceptions import InvalidStateError
from features import ProbabilityVector
from nodes import DecisionNode, LabelNode


class TestMidpoint(unittest.TestCase):

    def test_order_independent(self):
        self.assertEqual(midpoint(0.25, 0.75), 0.5)
        self.assertEqual(midpoint(0.75, 0.25), 0.5)

    def test_equal_values(self):
        self.assertEqual(midpoint(0.3, 0.3), 0.3)

    def test_zero(self):
        self.assertEqual(midpoint(0.0, 0.5), 0.25)


class TestSplitLeaf(unittest.TestCase):

    def test_choose_split(self):
        data = ProbabilityVector({"free": 0.75, "at": 0.25})
        exemplar = ProbabilityVector({"free": 0.25, "at": 0.25})
        self.assertEqual(choose_split(data, exemplar), ("free", 0.5))

    def test_new_example_with_larger_value_goes_right(self):
        leaf = LabelNode("ham", ProbabilityVector({"free": 0.25}))
        data = ProbabilityVector({"free": 0.75})
        node = split_leaf(leaf, data, "spam")

        self.assertIsInstance(node, DecisionNode)
        self.assertEqual(node.feature, "free")
        self.assertEqual(node.threshold, 0.5)
        self.assertIs(node.left, leaf)
        self.assertEqual(node.right.label, "spam")
        self.assertIs(node.right.exemplar, data)

    def test_new_example_with_smaller_value_goes_left(self):
        leaf = LabelNode("spam", ProbabilityVector({"free": 0.75}))
        node = split_leaf(leaf, ProbabilityVector({"free": 0.25}), "ham")
        self.assertEqual(node.left.label, "ham")
        self.assertIs(node.right, leaf)

    def test_identical_values_put_new_example_right(self):
        leaf = LabelNode("ham", ProbabilityVector({"free": 0.5}))
        node = split_leaf(leaf, ProbabilityVector({"free": 0.5}), "spam")
        self.assertEqual(node.threshold, 0.5)
        self.assertIs(node.left, leaf)
        self.assertEqual(node.right.label, "spam")

    def test_leaf_without_exemplar_cannot_split(self):
        with self.assertRaises(InvalidStateError):
            split_leaf(LabelNode("ham"), ProbabilityVector({"free": 0.5}), "spam")


class TestInsert(unittest.TestCase):
    """Test folding labeled examples into a tree."""

    def setUp(self):
        self.a = ProbabilityVector({"f1": 0.25, "f2": 0.25})
        self.b = ProbabilityVector({"f1": 0.75, "f2": 0.25})
        self.root = insert(insert(None, self.a, "A"), self.b, "B")

    def test_empty_tree_creates_leaf(self):
        root = insert(None, self.a, "A")
        self.assertIsInstance(root, LabelNode)
        self.assertEqual(root.label, "A")
        self.assertIs(root.exemplar, self.a)

    def test_same_label_keeps_single_leaf(self):
        root = None
        for value in (0.1, 0.9, 0.5, 0.3):
            root = insert(root, ProbabilityVector({"f1": value}), "A")
        self.assertIsInstance(root, LabelNode)
        self.assertEqual(root.exemplar.get("f1"), 0.1)

    def test_conflict_at_root_replaces_root(self):
        self.assertEqual(self.root, DecisionNode("f1", 0.5, LabelNode("A"), LabelNode("B")))

    def test_agreeing_example_leaves_tree_unchanged(self):
        before = self.root.to_json()
        same = insert(self.root, ProbabilityVector({"f1": 0.1, "f2": 0.9}), "A")
        self.assertIs(same, self.root)
        self.assertEqual(self.root.to_json(), before)

    def test_conflict_below_root_splits_that_leaf_only(self):
        c = ProbabilityVector({"f1": 0.25, "f2": 0.75})
        root = insert(self.root, c, "C")

        self.assertIs(root, self.root)
        self.assertEqual(root.right, LabelNode("B"))
        self.assertEqual(root.left, DecisionNode("f2", 0.5, LabelNode("A"), LabelNode("C")))

    def test_missing_feature_goes_left(self):
        """An example without the decision feature is routed to the left subtree."""
        c = ProbabilityVector({"f2": 0.75})
        root = insert(self.root, c, "C")

        self.assertEqual(root.right, LabelNode("B"))
        self.assertIsInstance(root.left, DecisionNode)
        self.assertEqual(root.left.feature, "f2")
        self.assertIs(root.left.right.exemplar, c)

    def test_missing_feature_agreeing_with_left_leaf(self):
        root = insert(self.root, ProbabilityVector({"f2": 0.9}), "A")
        self.assertEqual(root, DecisionNode("f1", 0.5, LabelNode("A"), LabelNode("B")))

    def test_split_separates_both_exemplars(self):
        """Each exemplar of a fresh split classifies back to its own leaf."""
        examples = [
            (ProbabilityVector({"f1": 0.1, "f2": 0.6, "f3": 0.3}), "spam"),
            (ProbabilityVector({"f1": 0.7, "f2": 0.2, "f3": 0.1}), "ham"),
            (ProbabilityVector({"f1": 0.2, "f2": 0.1, "f3": 0.7}), "ham"),
            (ProbabilityVector({"f1": 0.6, "f2": 0.3, "f3": 0.1}), "promo"),
        ]
        root = None
        for data, label in examples:
            root = insert(root, data, label)
            self.assertEqual(root.predict_single(data), label)

    def test_no_shared_features_split(self):
        root = insert(None, ProbabilityVector({"free": 0.75}), "spam")
        root = insert(root, ProbabilityVector({"noon": 0.5}), "ham")

        self.assertEqual(root.feature, "free")
        self.assertEqual(root.threshold, 0.375)
        self.assertEqual(root.left.label, "ham")
        self.assertEqual(root.right.label, "spam")

    def test_loaded_leaf_conflict_raises(self):
        root = DecisionNode("f1", 0.5, LabelNode("A"), LabelNode("B"))
        # Agreeing examples are fine without exemplars
        self.assertIs(insert(root, self.a, "A"), root)
        with self.assertRaises(InvalidStateError):
            insert(root, self.a, "C")


if __name__ == '__main__':
    unittest.main()
