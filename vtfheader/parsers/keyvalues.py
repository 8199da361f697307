import logging
import re
from typing import List, Tuple

logger = logging.getLogger(__name__)

# Newline, tab, carriage return, quote, space and braces all separate tokens
KEY_VALUE_DELIMITERS = re.compile(r'[\n\t\r" {}]')


def tokenize(text: str) -> List[str]:
    return [token for token in KEY_VALUE_DELIMITERS.split(text) if token]


def parse_key_values(text: str) -> List[Tuple[str, str]]:
    """
    Turn a KVD text block into ordered (key, value) pairs

    The first token is the section label ("Information") and is not part of
    any pair. A trailing token without a partner is dropped.

    Args:
        text: Text recovered from the KVD resource

    Returns:
        List of (key, value) tuples in encounter order
    """
    tokens = tokenize(text)[1:]

    pairs = []
    for index in range(0, len(tokens) - 1, 2):
        key, value = tokens[index], tokens[index + 1]
        logger.debug(f"  - {key}: {value}")
        pairs.append((key, value))

    if len(tokens) % 2:
        logger.debug(f"Dropping unpaired key value token: {tokens[-1]!r}")

    return pairs
