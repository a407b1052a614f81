"""
Inference module for sentiment classification.
Provides the TextClassifier facade tying vocabulary, encoder, engine and
decision rule together.
"""

import logging
import os
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Dict, List, Optional, Sequence, Union

import numpy as np

from .config import MAX_LENGTH, ClassifierConfig
from .decision import decide
from .engines import InferenceEngine, load_engine
from .errors import InferenceError, LoadError
from .label_mappings import SENTIMENT_LABELS, get_sentiment_description
from .tokenizer import encode
from .vocabulary import Vocabulary, load_vocabulary_file

logger = logging.getLogger(__name__)

_SENTIMENT_LABEL_LIST = [SENTIMENT_LABELS[i] for i in range(len(SENTIMENT_LABELS))]


def softmax(scores: np.ndarray) -> np.ndarray:
    shifted = np.exp(scores - np.max(scores))
    return shifted / shifted.sum()


def _is_distribution(scores: np.ndarray) -> bool:
    return bool((scores >= 0).all() and np.isclose(scores.sum(), 1.0, atol=1e-3))


class TextClassifier:
    """
    Sentence classifier over a fixed vocabulary and a pre-trained model.

    A classifier is only handed out once both the vocabulary and the model
    are loaded. The vocabulary is immutable; whether the engine may be called
    from several threads at once depends on the underlying runtime, so
    concurrent callers must serialize requests themselves.

    Example:
        >>> classifier = TextClassifier.initialize(
        ...     'assets/vocab.txt',
        ...     'assets/text_classification.tflite'
        ... )
        >>> classifier.classify("I liked the movie")
        1
        >>> classifier.analyze("I liked the movie")['label']
        'Positive'
    """

    def __init__(
        self,
        vocabulary: Vocabulary,
        engine: InferenceEngine,
        max_length: int = MAX_LENGTH,
        num_classes: Optional[int] = None,
        labels: Optional[Sequence[str]] = None
    ):
        """
        Args:
            vocabulary: Loaded vocabulary
            engine: Loaded inference engine
            max_length: Length of the encoded token sequence
            num_classes: Expected number of class scores (taken from the
                engine if None)
            labels: Human-readable label per class

        Raises:
            LoadError: If the configured shapes disagree with the model
        """
        if max_length <= 0:
            raise ValueError(f"max_length must be positive, got {max_length}")

        if engine.input_length is not None and engine.input_length != max_length:
            raise LoadError(f"Model expects {engine.input_length} input tokens "
                            f"but max_length is {max_length}")

        if num_classes is None:
            num_classes = engine.num_classes
        elif engine.num_classes is not None and engine.num_classes != num_classes:
            raise LoadError(f"Model produces {engine.num_classes} scores "
                            f"but {num_classes} classes were configured")

        self.vocabulary = vocabulary
        self.engine = engine
        self.max_length = max_length
        self.num_classes = num_classes
        self.labels = list(labels) if labels is not None else None

        logger.info("Classifier ready: %d vocabulary entries, max_length=%d, %s classes",
                    len(vocabulary), max_length, num_classes if num_classes is not None else 'unknown')

    @classmethod
    def initialize(
        cls,
        vocabulary_source: Union[Vocabulary, str, os.PathLike],
        model_handle: Union[InferenceEngine, str, os.PathLike],
        max_length: int = MAX_LENGTH,
        num_classes: Optional[int] = None,
        labels: Optional[Sequence[str]] = None,
        model_type: Optional[str] = None,
        device: Optional[str] = None
    ):
        """
        Load the vocabulary and model and return a ready classifier.

        Args:
            vocabulary_source: Vocabulary or path to a vocabulary file
            model_handle: Inference engine or path to a model file
            max_length: Length of the encoded token sequence
            num_classes: Expected number of classes
            labels: Human-readable label per class
            model_type: 'tflite' or 'torchscript' when model_handle is a path
            device: Torch device for TorchScript models

        Returns:
            TextClassifier instance

        Raises:
            LoadError: If either resource cannot be loaded
        """
        if isinstance(vocabulary_source, Vocabulary):
            vocabulary = vocabulary_source
        else:
            vocabulary = load_vocabulary_file(vocabulary_source)

        if isinstance(model_handle, InferenceEngine):
            engine = model_handle
        else:
            engine = load_engine(model_handle, model_type=model_type, device=device, num_classes=num_classes)

        return cls(vocabulary, engine, max_length=max_length, num_classes=num_classes, labels=labels)

    @classmethod
    def from_config(cls, config: ClassifierConfig):
        """Create a classifier from a ClassifierConfig."""
        return cls.initialize(
            config.vocab_path,
            config.model_path,
            max_length=config.max_length,
            num_classes=config.num_classes,
            labels=config.labels or None,
            model_type=config.model_type,
            device=config.device
        )

    @classmethod
    def initialize_in_background(cls, *args, **kwargs) -> Future:
        """
        Start ``initialize`` on a worker thread.

        Takes the same arguments as ``initialize``. The returned future
        resolves to the ready classifier, or raises the loading error.
        """
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix='classifier-init')
        try:
            return executor.submit(cls.initialize, *args, **kwargs)
        finally:
            executor.shutdown(wait=False)

    def preprocess(self, text: str) -> List[int]:
        """Encode text as a fixed-length sequence of vocabulary ids."""
        return encode(text, self.vocabulary, self.max_length)

    def scores(self, text: str) -> np.ndarray:
        """
        Get raw class scores from the model.

        Raises:
            InferenceError: If the engine fails or returns the wrong number
                of scores
        """
        token_ids = self.preprocess(text)
        scores = np.asarray(self.engine.infer(token_ids), dtype=np.float64).ravel()

        if self.num_classes is not None and scores.size != self.num_classes:
            raise InferenceError(f"Expected {self.num_classes} scores, model returned {scores.size}")

        return scores

    def predict_proba(self, text: str) -> np.ndarray:
        """
        Get class probabilities for input text.

        Scores that are not already a probability distribution are passed
        through a softmax.
        """
        scores = self.scores(text)
        if scores.size and not _is_distribution(scores):
            scores = softmax(scores)
        return scores

    def classify(self, text: str) -> int:
        """
        Predict the class index for input text.

        Raises:
            InferenceError: If the engine fails
            EmptyInputError: If the engine returns no scores
        """
        return decide(self.scores(text))

    def labels_for(self, num_scores: Optional[int]) -> Optional[List[str]]:
        """
        Labels for a score vector of the given length.

        Configured labels win. Otherwise a two-score output uses the
        sentiment labels.
        """
        if self.labels is not None:
            return self.labels
        if num_scores == len(SENTIMENT_LABELS):
            return list(_SENTIMENT_LABEL_LIST)
        return None

    def get_label(self, prediction_id: int, num_scores: Optional[int] = None) -> str:
        labels = self.labels_for(self.num_classes if num_scores is None else num_scores)
        if labels is not None and 0 <= prediction_id < len(labels):
            return labels[prediction_id]
        return f"Class {prediction_id}"

    def analyze(self, text: str, return_probs: bool = False) -> Dict:
        """
        Classify text and describe the result.

        Args:
            text: Input text to classify
            return_probs: Whether to return probabilities for all classes

        Returns:
            Dictionary containing:
                - text: The input text
                - label: Human-readable label
                - label_id: Predicted class index
                - confidence: Probability of the predicted class
                - description: Description of the prediction
                - probabilities: (optional) Probability per label
        """
        probs = self.predict_proba(text)
        prediction_id = decide(probs)
        label = self.get_label(prediction_id, num_scores=probs.size)

        if self.labels_for(probs.size) == _SENTIMENT_LABEL_LIST:
            description = get_sentiment_description(prediction_id)
        else:
            description = label

        result = {
            'text': text,
            'label': label,
            'label_id': prediction_id,
            'confidence': float(probs[prediction_id]),
            'description': description
        }

        if return_probs:
            result['probabilities'] = {
                self.get_label(i, num_scores=probs.size): float(p) for i, p in enumerate(probs)
            }

        return result
