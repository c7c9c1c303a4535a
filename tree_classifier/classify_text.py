#!/usr/bin/env python3
"""
Command line front end for the incremental tree classifier.

Trains a tree from a labeled CSV file, scores a saved tree against test data,
or classifies a single piece of text.

Usage:
    python classify_text.py train emails.csv model.txt
    python classify_text.py score model.txt test_emails.csv --plot accuracy.png
    python classify_text.py classify model.txt "Claim your free prize today"
"""

import argparse
import os
import sys
from typing import Dict, List, Optional

import matplotlib.pyplot as plt

from data_utils import load_labeled_csv, train_test_split, validate_dataset
from exceptions import ClassifierError
from features import TextBlock
from tree import OVERALL, Classifier


def parse_arguments(argv: Optional[List[str]] = None):
    """
    Parse command line arguments.

    Returns:
        argparse.Namespace: Parsed command line arguments
    """
    parser = argparse.ArgumentParser(
        description="Train, score and apply an incremental decision tree text classifier",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Train on a CSV with 'text' and 'label' columns and save the tree
  python classify_text.py train emails.csv model.txt

  # Hold out 20% of the rows and report accuracy on them
  python classify_text.py train emails.csv model.txt --holdout 0.2 --seed 7

  # Score a saved tree and save an accuracy chart
  python classify_text.py score model.txt test.csv --plot accuracy.png

  # Classify one message
  python classify_text.py classify model.txt "Claim your free prize today"
        """
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose output'
    )

    subparsers = parser.add_subparsers(dest='command', required=True)

    train = subparsers.add_parser('train', help='Train a tree from a labeled CSV file and save it')
    train.add_argument('input_csv', help='Path to labeled CSV file')
    train.add_argument('model', help='Path for the saved tree')
    train.add_argument('--holdout', type=float, default=None,
                       help='Fraction of rows held out to report accuracy (default: none)')
    train.add_argument('--seed', type=int, default=None, help='Seed for the holdout shuffle')

    score = subparsers.add_parser('score', help='Report accuracy of a saved tree on a labeled CSV file')
    score.add_argument('model', help='Path to a saved tree')
    score.add_argument('input_csv', help='Path to labeled CSV file')
    score.add_argument('--plot', help='Save a per-label accuracy bar chart to this path')

    classify = subparsers.add_parser('classify', help='Classify one piece of text with a saved tree')
    classify.add_argument('model', help='Path to a saved tree')
    classify.add_argument('text', help='Text to classify')

    for sub in (train, score):
        sub.add_argument('--text-column', default='text', help="Column holding the text (default: 'text')")
        sub.add_argument('--label-column', default='label', help="Column holding the label (default: 'label')")

    return parser.parse_args(argv)


def print_accuracy(accuracy: Dict[str, float]) -> None:
    """Print an accuracy map with the overall figure last."""
    for label in sorted(k for k in accuracy if k != OVERALL):
        print(f"  {label}: {accuracy[label]:.1%}")
    print(f"  {OVERALL}: {accuracy[OVERALL]:.1%}")


def plot_accuracy(accuracy: Dict[str, float], output_path: str) -> None:
    """
    Save a bar chart of per-label accuracy.

    Args:
        accuracy (Dict[str, float]): Result of Classifier.score()
        output_path (str): Image path
    """
    labels = sorted(k for k in accuracy if k != OVERALL) + [OVERALL]
    values = [accuracy[label] for label in labels]

    fig, ax = plt.subplots(figsize=(8, 5))
    ax.bar(labels, values, color=['steelblue'] * (len(labels) - 1) + ['darkorange'])
    ax.set_ylim(0.0, 1.0)
    ax.set_ylabel('Accuracy')
    ax.set_title('Classification Accuracy by Label')
    ax.grid(True, axis='y', alpha=0.3)
    fig.tight_layout()
    fig.savefig(output_path, dpi=150)
    plt.close(fig)

    print(f"Accuracy chart saved as '{output_path}'")


def run_train(args) -> None:
    data, labels = load_labeled_csv(args.input_csv, args.text_column, args.label_column)
    validate_dataset(data, labels, verbose=args.verbose)

    test_data, test_labels = [], []
    if args.holdout is not None:
        data, labels, test_data, test_labels = train_test_split(
            data, labels, test_fraction=args.holdout, random_state=args.seed
        )

    classifier = Classifier.from_training_data(data, labels, verbose=args.verbose)
    with open(args.model, 'w') as output:
        classifier.save(output)
    print(f"Saved tree with {classifier.node_count} nodes to {args.model}")

    if test_data:
        print("Holdout accuracy:")
        print_accuracy(classifier.score(test_data, test_labels))


def run_score(args) -> None:
    with open(args.model) as input_stream:
        classifier = Classifier.load(input_stream, verbose=args.verbose)
    data, labels = load_labeled_csv(args.input_csv, args.text_column, args.label_column)

    accuracy = classifier.score(data, labels)
    print("Accuracy:")
    print_accuracy(accuracy)
    if args.plot:
        plot_accuracy(accuracy, args.plot)


def run_classify(args) -> None:
    with open(args.model) as input_stream:
        classifier = Classifier.load(input_stream, verbose=args.verbose)
    print(classifier.classify(TextBlock(args.text)))


COMMANDS = {
    'train': run_train,
    'score': run_score,
    'classify': run_classify,
}


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main function to process command line arguments and run a command.

    Returns:
        int: Exit status
    """
    args = parse_arguments(argv)

    for attr in ('input_csv', 'model'):
        path = getattr(args, attr, None)
        if attr == 'model' and args.command == 'train':
            continue
        if path is not None and not os.path.exists(path):
            print(f"ERROR: File '{path}' not found")
            return 1

    try:
        COMMANDS[args.command](args)
    except ClassifierError as e:
        print(f"ERROR: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
