from typing import Dict, List, Optional, Sequence, Tuple
import os

import numpy as np
import pandas as pd

from exceptions import InvalidArgumentError
from features import FeatureVector, VectorFactory


def load_labeled_csv(csv_file_path: str, text_column: str = 'text', label_column: str = 'label',
                     vector_type: str = 'text') -> Tuple[List[FeatureVector], List[str]]:
    """
    Parse a labeled CSV file into feature vectors and labels.

    Expected CSV format:
    text,label
    "Win a free prize now",spam
    "Lunch at noon?",ham

    With vector_type='probabilities' the text column holds a JSON object of
    feature probabilities instead, e.g. {"free": 0.25, "prize": 0.25}.

    Args:
        csv_file_path (str): Path to the CSV file
        text_column (str): Column holding the item
        label_column (str): Column holding the label
        vector_type (str): How to build vectors ('text' or 'probabilities')

    Returns:
        Tuple[List[FeatureVector], List[str]]: Vectors and labels, in file order

    Raises:
        FileNotFoundError: If the CSV file doesn't exist
        InvalidArgumentError: If the file is empty, a column is missing or a row
                              cannot be turned into a vector
    """

    # Validate file exists
    if not os.path.exists(csv_file_path):
        raise FileNotFoundError(f"CSV file not found: {csv_file_path}")

    try:
        df = pd.read_csv(csv_file_path, dtype=str, keep_default_na=False)
    except pd.errors.EmptyDataError:
        raise InvalidArgumentError(f"CSV file is empty: {csv_file_path}")

    missing = [col for col in (text_column, label_column) if col not in df.columns]
    if missing:
        raise InvalidArgumentError(f"CSV must have columns: {[text_column, label_column]}. Found: {list(df.columns)}")

    df[text_column] = df[text_column].str.strip()
    df[label_column] = df[label_column].str.strip()
    incomplete = (df[text_column] == '') | (df[label_column] == '')
    if incomplete.any():
        print(f"Warning: dropping {int(incomplete.sum())} rows with missing {text_column}/{label_column}")
        df = df[~incomplete]

    data = []
    # Index still holds the original 0-based data row after dropping
    for index, source in df[text_column].items():
        try:
            data.append(VectorFactory.create_vector(vector_type, source))
        except InvalidArgumentError as e:
            raise InvalidArgumentError(f"Row {index + 1}: {e}")
    labels = df[label_column].tolist()

    return data, labels


def validate_dataset(data: Sequence[FeatureVector], labels: Sequence[str],
                     verbose: bool = True) -> Dict[str, int]:
    """
    Validate and summarize a labeled dataset.

    Args:
        data (Sequence[FeatureVector]): Items
        labels (Sequence[str]): Label per item
        verbose (bool): Print the summary

    Returns:
        Dict[str, int]: Validation statistics: total rows, empty vectors and one
                        count per label (keyed "label=<name>")

    Raises:
        InvalidArgumentError: If the sequences differ in length
    """
    if len(data) != len(labels):
        raise InvalidArgumentError(
            f"Length of provided data [{len(data)}] doesn't match provided labels [{len(labels)}]"
        )

    label_counts = pd.Series(list(labels), dtype=object).value_counts()
    stats = {
        'total_rows': len(data),
        'empty_vectors': sum(1 for item in data if item.is_empty()),
    }
    for label, count in label_counts.items():
        stats[f'label={label}'] = int(count)

    if verbose:
        print("Dataset statistics:")
        print(f"  Total rows: {stats['total_rows']:,}")
        for label, count in label_counts.items():
            share = count / stats['total_rows'] if stats['total_rows'] else 0.0
            print(f"  {label}: {count:,} ({share:.1%})")
        if stats['empty_vectors']:
            print(f"Warning: {stats['empty_vectors']} items have no features")

    return stats


def train_test_split(data: Sequence[FeatureVector], labels: Sequence[str],
                     test_fraction: float = 0.25,
                     random_state: Optional[int] = None) -> Tuple[List[FeatureVector], List[str], List[FeatureVector], List[str]]:
    """
    Shuffle a dataset and split it into training and test parts.

    Args:
        data (Sequence[FeatureVector]): Items
        labels (Sequence[str]): Label per item
        test_fraction (float): Share of rows held out for testing, in (0, 1)
        random_state (int, optional): Seed for a reproducible shuffle

    Returns:
        Tuple: (train_data, train_labels, test_data, test_labels)

    Raises:
        InvalidArgumentError: If lengths differ or test_fraction is out of range
    """
    if len(data) != len(labels):
        raise InvalidArgumentError(
            f"Length of provided data [{len(data)}] doesn't match provided labels [{len(labels)}]"
        )
    if not 0.0 < test_fraction < 1.0:
        raise InvalidArgumentError(f"test_fraction must be between 0 and 1, got {test_fraction}")

    rng = np.random.default_rng(random_state)
    order = rng.permutation(len(data))
    n_test = int(round(len(data) * test_fraction))

    test_idx, train_idx = order[:n_test], order[n_test:]
    return ([data[i] for i in train_idx], [labels[i] for i in train_idx],
            [data[i] for i in test_idx], [labels[i] for i in test_idx])
