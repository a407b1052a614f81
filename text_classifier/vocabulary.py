"""
Vocabulary loading.

A vocabulary file holds one word per line. Each non-blank line gets the next
sequential id starting at 0; blank lines are skipped without consuming an id.
"""

import logging
import os
from collections.abc import Mapping
from types import MappingProxyType
from typing import Dict, Iterator, Union

from .errors import LoadError

logger = logging.getLogger(__name__)


class Vocabulary(Mapping):
    """
    Read-only mapping from word to integer id.

    Instances never change after construction, so a single vocabulary can be
    shared between threads without locking.
    """

    def __init__(self, word_to_id: Dict[str, int]):
        self._word_to_id = MappingProxyType(dict(word_to_id))

    def __getitem__(self, word: str) -> int:
        return self._word_to_id[word]

    def __iter__(self) -> Iterator[str]:
        return iter(self._word_to_id)

    def __len__(self) -> int:
        return len(self._word_to_id)

    def __repr__(self) -> str:
        return f"Vocabulary(size={len(self)})"


def load_vocabulary(content: str) -> Vocabulary:
    """
    Parse raw vocabulary text into a Vocabulary.

    Args:
        content: Full text of the vocabulary resource

    Returns:
        Vocabulary mapping each non-blank line to its position among
        non-blank lines
    """
    word_to_id: Dict[str, int] = {}
    index = 0
    for line in content.split('\n'):
        word = line.strip()
        if not word:
            continue
        if word in word_to_id:
            # Later occurrence wins; the earlier id is left unused.
            logger.debug("Vocabulary entry %r redefined: %d -> %d", word, word_to_id[word], index)
        word_to_id[word] = index
        index += 1

    return Vocabulary(word_to_id)


def load_vocabulary_file(path: Union[str, os.PathLike]) -> Vocabulary:
    """
    Read a UTF-8 vocabulary file from disk.

    Raises:
        LoadError: If the file is missing, unreadable or not valid UTF-8
    """
    try:
        with open(path, 'r', encoding='utf-8', newline='') as f:
            content = f.read()
    except (OSError, UnicodeDecodeError) as exc:
        raise LoadError(f"Cannot read vocabulary file {path}: {exc}") from exc

    vocabulary = load_vocabulary(content)
    logger.info("Loaded vocabulary with %d entries from %s", len(vocabulary), path)
    return vocabulary
