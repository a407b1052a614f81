"""
Sentiment Text Classification

This package classifies sentences with a pre-trained model:
1. A vocabulary file maps words to integer ids
2. Sentences are encoded into fixed-length id sequences
3. A TensorFlow Lite or TorchScript model scores each class
4. The highest-scoring class is the prediction
"""

__version__ = "1.0.0"

from .decision import decide
from .engines import InferenceEngine, TFLiteEngine, TorchScriptEngine, load_engine
from .errors import ClassifierError, EmptyInputError, InferenceError, LoadError
from .inference import TextClassifier
from .label_mappings import SENTIMENT_LABELS
from .tokenizer import encode
from .vocabulary import Vocabulary, load_vocabulary, load_vocabulary_file

__all__ = [
    'TextClassifier',
    'Vocabulary',
    'load_vocabulary',
    'load_vocabulary_file',
    'encode',
    'decide',
    'InferenceEngine',
    'TFLiteEngine',
    'TorchScriptEngine',
    'load_engine',
    'ClassifierError',
    'LoadError',
    'InferenceError',
    'EmptyInputError',
    'SENTIMENT_LABELS'
]
