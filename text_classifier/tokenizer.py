"""
Fixed-length encoding of text into vocabulary ids.
"""

from typing import List, Mapping

PAD_ID = 0


def encode(text: str, vocabulary: Mapping[str, int], max_length: int) -> List[int]:
    """
    Encode text as exactly ``max_length`` vocabulary ids.

    The text is split on single spaces and each token is lowercased before
    lookup. Tokens missing from the vocabulary are dropped without taking an
    output slot. Processing stops once ``max_length`` ids have been written;
    unused trailing slots stay at PAD_ID.

    Args:
        text: Input sentence
        vocabulary: Word to id mapping
        max_length: Length of the returned sequence

    Returns:
        List of ``max_length`` integer ids
    """
    if max_length <= 0:
        raise ValueError(f"max_length must be positive, got {max_length}")

    ids = [PAD_ID] * max_length
    cursor = 0
    for token in text.split(' '):
        if cursor >= max_length:
            break
        token_id = vocabulary.get(token.lower())
        if token_id is None:
            continue
        ids[cursor] = token_id
        cursor += 1

    return ids
