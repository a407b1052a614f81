"""
Inference engines wrapping pre-trained classification models.

An engine takes one fixed-length sequence of token ids and returns one score
per class. Engines hold no per-request state, but thread safety is whatever
the wrapped runtime provides: callers running requests concurrently must
synchronize access themselves.
"""

import logging
import os
from typing import Optional, Sequence, Union

import numpy as np
import torch

from .errors import InferenceError, LoadError

logger = logging.getLogger(__name__)

MODEL_TYPES = ('tflite', 'torchscript')

_SUFFIX_TO_TYPE = {
    '.tflite': 'tflite',
    '.pt': 'torchscript',
    '.pth': 'torchscript',
}


class InferenceEngine:
    """Base class for inference engines."""

    @property
    def input_length(self) -> Optional[int]:
        """Expected length of the token sequence, if the model declares one."""
        return None

    @property
    def num_classes(self) -> Optional[int]:
        """Number of class scores produced, if the model declares one."""
        return None

    def infer(self, token_ids: Sequence[int]) -> np.ndarray:
        """
        Run the model on a single token sequence.

        Args:
            token_ids: Encoded token ids

        Returns:
            1-D array of class scores

        Raises:
            InferenceError: If the model fails to produce scores
        """
        raise NotImplementedError


class TFLiteEngine(InferenceEngine):
    """
    Engine backed by a TensorFlow Lite interpreter.

    Example:
        >>> engine = TFLiteEngine.from_file('assets/text_classification.tflite')
        >>> engine.infer([5, 9] + [0] * 254)
        array([0.12, 0.88], dtype=float32)
    """

    def __init__(self, interpreter):
        """
        Args:
            interpreter: Interpreter with tensors already allocated
        """
        self.interpreter = interpreter
        self._input = interpreter.get_input_details()[0]
        self._output = interpreter.get_output_details()[0]

    @classmethod
    def from_file(cls, model_path: Union[str, os.PathLike], num_threads: Optional[int] = None):
        """
        Load a .tflite model file.

        Raises:
            LoadError: If the file is missing, TensorFlow is not installed, or
                the interpreter rejects the model
        """
        if not os.path.exists(model_path):
            raise LoadError(f"Model file not found: {model_path}")

        try:
            import tensorflow as tf
        except ImportError as exc:
            raise LoadError("TensorFlow is required to run .tflite models "
                            "(pip install text-classifier[tflite])") from exc

        try:
            interpreter = tf.lite.Interpreter(model_path=os.fspath(model_path), num_threads=num_threads)
            interpreter.allocate_tensors()
        except (ValueError, RuntimeError) as exc:
            raise LoadError(f"Cannot load TFLite model {model_path}: {exc}") from exc

        logger.info("Loaded TFLite model from %s", model_path)
        return cls(interpreter)

    @property
    def input_length(self) -> Optional[int]:
        return int(self._input['shape'][-1])

    @property
    def num_classes(self) -> Optional[int]:
        return int(self._output['shape'][-1])

    def infer(self, token_ids: Sequence[int]) -> np.ndarray:
        # Batch of one
        inputs = np.asarray(token_ids).astype(self._input['dtype'])[None, ...]
        try:
            self.interpreter.set_tensor(self._input['index'], inputs)
            self.interpreter.invoke()
            scores = self.interpreter.get_tensor(self._output['index'])[0]
        except (ValueError, RuntimeError) as exc:
            raise InferenceError(f"TFLite inference failed: {exc}") from exc

        return np.asarray(scores)


class TorchScriptEngine(InferenceEngine):
    """
    Engine backed by a TorchScript module.

    The module receives a ``(1, length)`` long tensor and returns either a
    ``(1, num_classes)`` tensor, a tuple whose first element is one, or a dict
    with a ``'logits'`` entry.
    """

    def __init__(self, module, device: str = 'cpu', num_classes: Optional[int] = None):
        self.module = module
        self.device = device
        self._num_classes = num_classes

        self.module.to(device)
        self.module.eval()

    @classmethod
    def from_file(
        cls,
        model_path: Union[str, os.PathLike],
        device: Optional[str] = None,
        num_classes: Optional[int] = None
    ):
        """
        Load a TorchScript archive saved with ``torch.jit.save``.

        Args:
            model_path: Path to the .pt file
            device: Device to run on (defaults to 'cuda' if available else 'cpu')
            num_classes: Expected number of classes, if known

        Raises:
            LoadError: If the file is missing or is not a TorchScript archive
        """
        if not os.path.exists(model_path):
            raise LoadError(f"Model file not found: {model_path}")

        if device is None:
            device = 'cuda' if torch.cuda.is_available() else 'cpu'

        try:
            module = torch.jit.load(os.fspath(model_path), map_location=device)
        except (RuntimeError, ValueError) as exc:
            raise LoadError(f"Cannot load TorchScript model {model_path}: {exc}") from exc

        logger.info("Loaded TorchScript model from %s on %s", model_path, device)
        return cls(module, device=device, num_classes=num_classes)

    @property
    def num_classes(self) -> Optional[int]:
        return self._num_classes

    def infer(self, token_ids: Sequence[int]) -> np.ndarray:
        inputs = torch.as_tensor(list(token_ids), dtype=torch.long, device=self.device).unsqueeze(0)
        try:
            with torch.no_grad():
                outputs = self.module(inputs)

            if isinstance(outputs, dict):
                outputs = outputs['logits']
            elif isinstance(outputs, (tuple, list)):
                outputs = outputs[0]
            shape = tuple(outputs.shape)
        except (RuntimeError, ValueError, IndexError, KeyError, AttributeError) as exc:
            raise InferenceError(f"TorchScript inference failed: {exc}") from exc

        # Exactly one row of scores for the batch of one
        if len(shape) != 2 or shape[0] != 1:
            raise InferenceError(f"Expected model output of shape (1, num_classes), got {shape}")

        return outputs[0].detach().cpu().numpy()


def load_engine(
    model_path: Union[str, os.PathLike],
    model_type: Optional[str] = None,
    device: Optional[str] = None,
    num_classes: Optional[int] = None
) -> InferenceEngine:
    """
    Load an inference engine for a model file.

    Args:
        model_path: Path to the model file
        model_type: 'tflite' or 'torchscript' (inferred from the suffix if None)
        device: Torch device for TorchScript models
        num_classes: Expected number of classes for engines that cannot report it

    Returns:
        Loaded inference engine
    """
    if model_type is None:
        suffix = os.path.splitext(os.fspath(model_path))[1].lower()
        if suffix not in _SUFFIX_TO_TYPE:
            raise ValueError(f"Cannot infer model type from {model_path}. "
                             f"Pass model_type as one of {MODEL_TYPES}")
        model_type = _SUFFIX_TO_TYPE[suffix]

    model_type = model_type.lower()
    if model_type == 'tflite':
        return TFLiteEngine.from_file(model_path)
    elif model_type == 'torchscript':
        return TorchScriptEngine.from_file(model_path, device=device, num_classes=num_classes)
    else:
        raise ValueError(f"Unknown model type: {model_type}. Use one of {MODEL_TYPES}")
