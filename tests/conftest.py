from pathlib import Path

import numpy as np
import pytest
import torch

from text_classifier import InferenceEngine, Vocabulary, load_vocabulary

VOCAB_TEXT = "<pad>\n<start>\n<unknown>\n\ni\nliked\nthe\nmovie\ndidn't\nlike\n"


class KeywordModel(torch.nn.Module):
    """Scores a sentence positive when it contains ``positive_id``."""

    def __init__(self, positive_id: int) -> None:
        super().__init__()
        self.positive_id = positive_id

    def forward(self, input_ids: torch.Tensor) -> torch.Tensor:
        hit = (input_ids == self.positive_id).any(dim=1).float()
        return torch.stack([1.0 - hit, hit], dim=1)


class FixedEngine(InferenceEngine):
    def __init__(self, scores, input_length=None, num_classes=None) -> None:
        self.scores = scores
        self._input_length = input_length
        self._num_classes = num_classes
        self.calls = []

    @property
    def input_length(self):
        return self._input_length

    @property
    def num_classes(self):
        return self._num_classes

    def infer(self, token_ids):
        self.calls.append(list(token_ids))
        return np.asarray(self.scores)


class FakeInterpreter:
    """Stands in for tf.lite.Interpreter with a keyword rule on id 5."""

    def __init__(self, length: int = 256, classes: int = 2, dtype=np.float32) -> None:
        self.length = length
        self.classes = classes
        self.dtype = dtype
        self.tensors = {}

    def get_input_details(self):
        return [{'index': 0, 'shape': np.array([1, self.length]), 'dtype': self.dtype}]

    def get_output_details(self):
        return [{'index': 1, 'shape': np.array([1, self.classes]), 'dtype': np.float32}]

    def set_tensor(self, index, value):
        if value.shape != (1, self.length):
            raise ValueError(f"Cannot set tensor: got shape {value.shape}")
        self.tensors[index] = value

    def invoke(self):
        positive = float((self.tensors[0] == 5).any())
        self.tensors[1] = np.array([[1.0 - positive, positive]], dtype=np.float32)

    def get_tensor(self, index):
        return self.tensors[index]


@pytest.fixture
def vocab() -> Vocabulary:
    return load_vocabulary(VOCAB_TEXT)


@pytest.fixture
def vocab_file(tmp_path: Path) -> Path:
    path = tmp_path / "vocab.txt"
    path.write_text(VOCAB_TEXT, encoding="utf-8")
    return path


@pytest.fixture
def model_file(tmp_path: Path, vocab: Vocabulary) -> Path:
    path = tmp_path / "model.pt"
    torch.jit.save(torch.jit.script(KeywordModel(vocab["liked"])), str(path))
    return path
