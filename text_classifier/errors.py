"""
Exceptions raised by the text classification package.
"""


class ClassifierError(Exception):
    """Base class for all classifier errors."""


class LoadError(ClassifierError):
    """A vocabulary, model or configuration resource could not be loaded."""


class InferenceError(ClassifierError):
    """The inference engine failed to produce class scores."""


class EmptyInputError(ClassifierError, ValueError):
    """A decision was requested over an empty score vector."""
