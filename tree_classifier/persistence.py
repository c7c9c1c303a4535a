from typing import Iterator, List, Optional, TextIO

from exceptions import InvalidArgumentError, TreeParseError
from nodes import DecisionNode, LabelNode, TreeNode, iter_preorder

FEATURE_PREFIX = "Feature:"
THRESHOLD_PREFIX = "Threshold:"

# Written and read verbatim; everything after it is the feature name
FEATURE_LINE_START = FEATURE_PREFIX + " "

__all__ = [
    'FEATURE_PREFIX', 'THRESHOLD_PREFIX', 'TreeReader', 'TreeWriter',
    'check_label', 'iter_preorder', 'load_tree', 'save_tree',
]


def check_label(label: str) -> None:
    """
    Make sure a label can be written as a single label line.

    Raises:
        InvalidArgumentError: If the label is not a non-blank single line that
                              could not be mistaken for a feature line
    """
    if not isinstance(label, str) or not label.strip():
        raise InvalidArgumentError(f"Labels must be non-blank strings, got {label!r}")
    if "\n" in label or "\r" in label:
        raise InvalidArgumentError(f"Labels cannot contain line breaks: {label!r}")
    if label.startswith(FEATURE_PREFIX):
        raise InvalidArgumentError(f"Labels cannot start with '{FEATURE_PREFIX}': {label!r}")


class TreeWriter:
    """
    Writes a tree as lines of text in pre-order.

    A DecisionNode becomes two lines, "Feature: <name>" and
    "Threshold: <value>"; a LabelNode becomes one line holding its label.
    """

    def __init__(self, output: TextIO):
        if output is None:
            raise InvalidArgumentError("output cannot be None")
        self.output = output

    def write(self, root: TreeNode) -> int:
        """
        Write a whole tree.

        Args:
            root (TreeNode): Root of the tree to write

        Returns:
            int: Number of nodes written
        """
        count = 0
        for node in iter_preorder(root):
            self.emit(node)
            count += 1
        return count

    def emit(self, node: TreeNode) -> None:
        """Write the lines for a single node."""
        if node.is_leaf:
            self.output.write(f"{node.label}\n")
        else:
            # repr() round-trips floats exactly
            self.output.write(f"{FEATURE_LINE_START}{node.feature}\n")
            self.output.write(f"{THRESHOLD_PREFIX} {node.threshold!r}\n")


class TreeReader:
    """
    Rebuilds a tree from the pre-order text written by TreeWriter.

    The format has no structure markers: every "Feature:" line is followed by
    a "Threshold:" line, then the complete left subtree, then the complete
    right subtree. Any other line is a label.

    Nodes are consumed in exactly the order the writer emits them; decision
    nodes still waiting for children are kept on an explicit stack, so the
    depth of the tree is not limited by the interpreter's recursion limit.
    """

    def __init__(self, input_stream: TextIO):
        if input_stream is None:
            raise InvalidArgumentError("input cannot be None")
        self._lines = iter(input_stream)
        self.line_number = 0

    def read(self) -> TreeNode:
        """
        Read one complete tree and check nothing but blank lines follows it.

        Returns:
            TreeNode: Root of the tree

        Raises:
            TreeParseError: If the input is empty, truncated or malformed
        """
        root = self._read_node()
        pending: List[DecisionNode] = [] if root.is_leaf else [root]
        while pending:
            node = self._read_node()
            parent = pending[-1]
            if parent.left is None:
                parent.left = node
            else:
                parent.right = node
                pending.pop()
            if not node.is_leaf:
                pending.append(node)

        for line in self._iter_remaining():
            if line.strip():
                raise TreeParseError(f"unexpected content after complete tree: {line!r}", self.line_number)
        return root

    def _iter_remaining(self) -> Iterator[str]:
        while True:
            line = self._next_line()
            if line is None:
                return
            yield line

    def _next_line(self) -> Optional[str]:
        try:
            line = next(self._lines)
        except StopIteration:
            return None
        self.line_number += 1
        return line.rstrip("\r\n")

    def _require_line(self, what: str) -> str:
        line = self._next_line()
        if line is None:
            raise TreeParseError(f"expected {what} but reached end of input", self.line_number + 1)
        return line

    def _read_node(self) -> TreeNode:
        """Read the line(s) of one node; a DecisionNode comes back without children."""
        line = self._require_line("a node")
        if not line.startswith(FEATURE_PREFIX):
            if not line.strip():
                raise TreeParseError("expected a node but found a blank line", self.line_number)
            return LabelNode(line)

        if not line.startswith(FEATURE_LINE_START) or len(line) == len(FEATURE_LINE_START):
            raise TreeParseError(f"expected '{FEATURE_LINE_START}<name>', got {line!r}", self.line_number)
        feature = line[len(FEATURE_LINE_START):]

        threshold_line = self._require_line(f"a '{THRESHOLD_PREFIX}' line")
        if not threshold_line.startswith(THRESHOLD_PREFIX):
            raise TreeParseError(
                f"expected a '{THRESHOLD_PREFIX}' line after feature '{feature}', got {threshold_line!r}",
                self.line_number,
            )
        raw = threshold_line[len(THRESHOLD_PREFIX):].strip()
        try:
            threshold = float(raw)
        except ValueError:
            raise TreeParseError(f"threshold is not a number: {raw!r}", self.line_number) from None

        return DecisionNode(feature, threshold)


def save_tree(root: TreeNode, output: TextIO) -> int:
    """
    Write a tree to a text stream.

    Args:
        root (TreeNode): Root of the tree
        output (TextIO): Stream to write to

    Returns:
        int: Number of nodes written
    """
    return TreeWriter(output).write(root)


def load_tree(input_stream: TextIO) -> TreeNode:
    """
    Read a tree from a text stream.

    Args:
        input_stream (TextIO): Stream positioned at the first line of the tree

    Returns:
        TreeNode: Root of the tree

    Raises:
        InvalidArgumentError: If input_stream is None
        TreeParseError: If the text is not a valid tree
    """
    return TreeReader(input_stream).read()
