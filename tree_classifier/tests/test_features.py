import unittest

import sys
import os
# Add parent directory to path so we can import the classifier modules
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from exceptions import InvalidArgumentError, MissingFeatureError
from features import FeatureVector, ProbabilityVector, TextBlock, VectorFactory


class TestFeatureVectorInterface(unittest.TestCase):
    """Test the FeatureVector abstract base class interface."""

    def test_cannot_instantiate_abstract_class(self):
        """FeatureVector should not be instantiable directly."""
        with self.assertRaises(TypeError):
            FeatureVector()


class TestProbabilityVector(unittest.TestCase):
    """Test the mapping-backed FeatureVector."""

    def setUp(self):
        self.vector = ProbabilityVector({"free": 0.5, "prize": 0.25, "now": 0.25})

    def test_lookup(self):
        self.assertTrue(self.vector.contains_feature("free"))
        self.assertFalse(self.vector.contains_feature("meeting"))
        self.assertIn("prize", self.vector)
        self.assertNotIn("meeting", self.vector)
        self.assertEqual(self.vector.get("free"), 0.5)
        self.assertEqual(len(self.vector), 3)
        self.assertFalse(self.vector.is_empty())

    def test_missing_feature_raises(self):
        """get() on an absent feature raises a lookup error naming the feature."""
        with self.assertRaises(MissingFeatureError) as ctx:
            self.vector.get("meeting")
        self.assertEqual(ctx.exception.feature, "meeting")
        self.assertIsInstance(ctx.exception, LookupError)

    def test_get_or_default(self):
        self.assertEqual(self.vector.get_or_default("free"), 0.5)
        self.assertEqual(self.vector.get_or_default("meeting"), 0.0)
        self.assertEqual(self.vector.get_or_default("meeting", 1.0), 1.0)

    def test_feature_order_is_insertion_order(self):
        self.assertEqual(self.vector.get_features(), ["free", "prize", "now"])

    def test_empty_vector(self):
        empty = ProbabilityVector()
        self.assertTrue(empty.is_empty())
        self.assertEqual(len(empty), 0)

    def test_invalid_values(self):
        with self.assertRaises(InvalidArgumentError):
            ProbabilityVector({"free": "lots"})
        with self.assertRaises(InvalidArgumentError):
            ProbabilityVector({1: 0.5})

    def test_unsaveable_feature_names(self):
        for name in ("", "two\nlines", "carriage\rreturn"):
            with self.assertRaises(InvalidArgumentError):
                ProbabilityVector({name: 0.1})
        self.assertIn(" padded ", ProbabilityVector({" padded ": 0.1}))

    def test_vectors_are_independent_of_source_dict(self):
        source = {"a": 0.1}
        vector = ProbabilityVector(source)
        source["a"] = 0.9
        self.assertEqual(vector.get("a"), 0.1)
        self.assertEqual(vector.to_dict(), {"a": 0.1})

    def test_equality(self):
        self.assertEqual(ProbabilityVector({"a": 0.1}), ProbabilityVector({"a": 0.1}))
        self.assertNotEqual(ProbabilityVector({"a": 0.1}), ProbabilityVector({"a": 0.2}))


class TestFindBiggestDifference(unittest.TestCase):
    """Test selection of the most differing feature."""

    def test_shared_features_only(self):
        """Features missing from either vector are ignored when some are shared."""
        ours = ProbabilityVector({"a": 0.1, "b": 0.5, "c": 0.9})
        theirs = ProbabilityVector({"a": 0.2, "b": 0.1, "d": 0.0})
        # a differs by 0.1, b by 0.4; c is not shared
        self.assertEqual(ours.find_biggest_difference(theirs), "b")

    def test_tie_goes_to_first_feature(self):
        ours = ProbabilityVector({"x": 0.75, "y": 0.25})
        theirs = ProbabilityVector({"y": 0.75, "x": 0.25})
        self.assertEqual(ours.find_biggest_difference(theirs), "x")
        self.assertEqual(theirs.find_biggest_difference(ours), "y")

    def test_no_shared_features_uses_union(self):
        """With nothing in common, absent values count as zero."""
        ours = ProbabilityVector({"meeting": 0.25, "noon": 0.75})
        theirs = ProbabilityVector({"free": 0.5, "prize": 0.5})
        self.assertEqual(ours.find_biggest_difference(theirs), "noon")

    def test_both_empty_raises(self):
        with self.assertRaises(InvalidArgumentError):
            ProbabilityVector().find_biggest_difference(ProbabilityVector())

    def test_non_vector_raises(self):
        with self.assertRaises(InvalidArgumentError):
            ProbabilityVector({"a": 0.1}).find_biggest_difference({"a": 0.2})


class TestTextBlock(unittest.TestCase):
    """Test FeatureVectors built from raw text."""

    def test_word_probabilities(self):
        block = TextBlock("The cat saw the dog")
        self.assertAlmostEqual(block.get("the"), 0.4)
        self.assertAlmostEqual(block.get("cat"), 0.2)
        self.assertAlmostEqual(block.get("dog"), 0.2)
        self.assertAlmostEqual(sum(block.get(f) for f in block.get_features()), 1.0)

    def test_case_and_punctuation_are_ignored(self):
        block = TextBlock("FREE! free, Free?")
        self.assertEqual(block.get_features(), ["free"])
        self.assertEqual(block.get("free"), 1.0)

    def test_empty_text(self):
        block = TextBlock("")
        self.assertTrue(block.is_empty())
        self.assertEqual(block.text, "")

    def test_none_text_raises(self):
        with self.assertRaises(InvalidArgumentError):
            TextBlock(None)


class TestVectorFactory(unittest.TestCase):
    """Test the vector factory."""

    def test_create_text_vector(self):
        vector = VectorFactory.create_vector('text', "win a prize")
        self.assertIsInstance(vector, TextBlock)
        self.assertIn("prize", vector)

    def test_create_probability_vector_from_json(self):
        vector = VectorFactory.create_vector('PROBABILITIES', '{"free": 0.25, "prize": 0.75}')
        self.assertIsInstance(vector, ProbabilityVector)
        self.assertEqual(vector.get("prize"), 0.75)

    def test_create_probability_vector_from_mapping(self):
        vector = VectorFactory.create_vector('probabilities', {"free": 1.0})
        self.assertEqual(vector.get("free"), 1.0)

    def test_invalid_json(self):
        with self.assertRaises(InvalidArgumentError):
            VectorFactory.create_vector('probabilities', '{"free": ')
        with self.assertRaises(InvalidArgumentError):
            VectorFactory.create_vector('probabilities', '[0.1, 0.2]')

    def test_unsupported_type(self):
        with self.assertRaises(InvalidArgumentError):
            VectorFactory.create_vector('image', "pixels")

    def test_register_vector_type(self):
        VectorFactory.register_vector_type('Upper', lambda text: TextBlock(text.upper()))
        try:
            vector = VectorFactory.create_vector('upper', "Hello")
            self.assertIn("hello", vector)
        finally:
            del VectorFactory.VECTOR_TYPES['upper']


if __name__ == '__main__':
    unittest.main()
