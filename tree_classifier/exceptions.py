class ClassifierError(Exception):
    """Base class for errors raised by the tree classifier."""


class InvalidArgumentError(ClassifierError, ValueError):
    """Input is missing, empty, mismatched or otherwise unusable."""


class TreeParseError(InvalidArgumentError):
    """A persisted tree could not be read."""

    def __init__(self, message: str, line_number: int):
        super().__init__(f"line {line_number}: {message}")
        self.line_number = line_number


class InvalidStateError(ClassifierError, RuntimeError):
    """The classifier or tree is not in a state that allows the operation."""


class MissingFeatureError(InvalidStateError, LookupError):
    """A feature required by the tree is absent from the input."""

    def __init__(self, feature: str):
        super().__init__(f"Feature '{feature}' is not present in the feature vector")
        self.feature = feature
