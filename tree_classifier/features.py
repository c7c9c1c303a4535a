from abc import ABC, abstractmethod
import json
import re
from collections import Counter
from typing import Dict, List, Mapping, Optional, Union

import numpy as np

from exceptions import InvalidArgumentError, MissingFeatureError


class FeatureVector(ABC):
    """
    Abstract base class for the items the classifier learns from and labels.

    A FeatureVector maps feature names (e.g. words) to probability values and
    can compare itself against another vector to find the feature on which the
    two disagree the most. Vectors are treated as immutable once built.
    """

    @abstractmethod
    def contains_feature(self, feature: str) -> bool:
        """
        Returns True if this vector has a value for the given feature.

        Args:
            feature (str): Feature name to look up

        Returns:
            bool: Whether the feature is present
        """
        pass

    @abstractmethod
    def get(self, feature: str) -> float:
        """
        Returns the probability stored for a feature.

        Args:
            feature (str): Feature name to look up

        Returns:
            float: Probability value of the feature

        Raises:
            MissingFeatureError: If the feature is not present
        """
        pass

    @abstractmethod
    def get_features(self) -> List[str]:
        """
        Returns the feature names of this vector in iteration order.

        Returns:
            List[str]: Feature names
        """
        pass

    def get_or_default(self, feature: str, default: float = 0.0) -> float:
        """Value of a feature, or `default` when the feature is absent."""
        if self.contains_feature(feature):
            return self.get(feature)
        return default

    def find_biggest_difference(self, other: 'FeatureVector') -> str:
        """
        Finds the feature whose values differ the most between two vectors.

        Only features present in both vectors are considered, walked in this
        vector's iteration order; on a tie the first one encountered wins.
        When the vectors have no feature in common, every feature of either
        vector is considered and absent values count as 0.0.

        Args:
            other (FeatureVector): Vector to compare against

        Returns:
            str: Name of the most differing feature

        Raises:
            InvalidArgumentError: If other is not a FeatureVector, or both
                                  vectors are empty
        """
        if not isinstance(other, FeatureVector):
            raise InvalidArgumentError(f"Cannot compare FeatureVector with {type(other)}")

        candidates = [f for f in self.get_features() if other.contains_feature(f)]
        if not candidates:
            candidates = self.get_features() + [
                f for f in other.get_features() if not self.contains_feature(f)
            ]
        if not candidates:
            raise InvalidArgumentError("Cannot compare two empty feature vectors")

        ours = np.array([self.get_or_default(f) for f in candidates], dtype=float)
        theirs = np.array([other.get_or_default(f) for f in candidates], dtype=float)

        # argmax returns the first index on ties
        return candidates[int(np.argmax(np.abs(ours - theirs)))]

    def __contains__(self, feature: object) -> bool:
        return isinstance(feature, str) and self.contains_feature(feature)

    def __len__(self) -> int:
        return len(self.get_features())

    def is_empty(self) -> bool:
        """
        Checks if the vector has any features.

        Returns:
            bool: True if the vector is empty, False otherwise
        """
        return len(self) == 0


class ProbabilityVector(FeatureVector):
    """
    FeatureVector backed by an explicit feature -> probability mapping.
    """

    def __init__(self, probabilities: Optional[Mapping[str, float]] = None):
        """
        Initialize the vector from a mapping.

        Args:
            probabilities (Mapping[str, float], optional): Feature probabilities.
                                                           Insertion order is kept.

        Raises:
            InvalidArgumentError: If a feature name is not a non-empty string
                                  without line breaks, or a value is not a number
        """
        self._values: Dict[str, float] = {}
        for feature, value in (probabilities or {}).items():
            if not isinstance(feature, str):
                raise InvalidArgumentError(f"Feature names must be strings, got {type(feature)}")
            # Names are saved verbatim on a single "Feature: <name>" line
            if not feature:
                raise InvalidArgumentError("Feature names cannot be empty")
            if "\n" in feature or "\r" in feature:
                raise InvalidArgumentError(f"Feature names cannot contain line breaks: {feature!r}")
            try:
                self._values[feature] = float(value)
            except (TypeError, ValueError):
                raise InvalidArgumentError(f"Value for feature '{feature}' is not a number: {value!r}")

    def contains_feature(self, feature: str) -> bool:
        return feature in self._values

    def get(self, feature: str) -> float:
        try:
            return self._values[feature]
        except KeyError:
            raise MissingFeatureError(feature) from None

    def get_features(self) -> List[str]:
        return list(self._values)

    def to_dict(self) -> Dict[str, float]:
        """Copy of the underlying mapping."""
        return dict(self._values)

    def __eq__(self, other) -> bool:
        if not isinstance(other, ProbabilityVector):
            return False
        return self._values == other._values

    def __hash__(self) -> int:
        return hash(frozenset(self._values.items()))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._values})"


class TextBlock(ProbabilityVector):
    """
    FeatureVector built from a piece of text, such as the body of an email.

    Each distinct lower-cased word is a feature; its value is the fraction of
    all words in the text that are that word.
    """

    WORD_PATTERN = re.compile(r"[a-z0-9']+")

    def __init__(self, text: str):
        if text is None:
            raise InvalidArgumentError("text cannot be None")
        self.text = text
        words = self.WORD_PATTERN.findall(text.lower())
        total = len(words)
        counts = Counter(words)
        super().__init__({word: count / total for word, count in counts.items()})

    def __repr__(self) -> str:
        preview = self.text if len(self.text) <= 40 else self.text[:37] + "..."
        return f"TextBlock({preview!r}, features={len(self)})"


class VectorFactory:
    """
    Factory for creating FeatureVector instances from raw dataset values.
    """

    VECTOR_TYPES = {
        'text': TextBlock,
        'probabilities': None,  # Set below; parses JSON objects
    }

    @classmethod
    def create_vector(cls, vector_type: str, source: Union[str, Mapping[str, float]]) -> FeatureVector:
        """
        Create a new vector of the specified type.

        Args:
            vector_type (str): Type of vector ('text' or 'probabilities')
            source: Raw text for 'text'; a mapping or a JSON object string
                    for 'probabilities'

        Returns:
            FeatureVector: New vector instance

        Raises:
            InvalidArgumentError: If vector_type is not supported
        """
        vector_type = vector_type.lower()

        if vector_type not in cls.VECTOR_TYPES:
            raise InvalidArgumentError(f"Unsupported vector type: {vector_type}. Supported types: {list(cls.VECTOR_TYPES.keys())}")

        return cls.VECTOR_TYPES[vector_type](source)

    @classmethod
    def register_vector_type(cls, type_name: str, builder):
        """
        Register a new vector type.

        Args:
            type_name (str): Name of the vector type
            builder: Callable taking the raw source and returning a FeatureVector
        """
        cls.VECTOR_TYPES[type_name.lower()] = builder


def _probabilities_from_source(source: Union[str, Mapping[str, float]]) -> ProbabilityVector:
    if isinstance(source, str):
        try:
            source = json.loads(source)
        except json.JSONDecodeError as e:
            raise InvalidArgumentError(f"Invalid JSON feature mapping: {e}")
    if not isinstance(source, Mapping):
        raise InvalidArgumentError(f"Feature mapping must be an object, got {type(source).__name__}")
    return ProbabilityVector(source)


VectorFactory.register_vector_type('probabilities', _probabilities_from_source)
