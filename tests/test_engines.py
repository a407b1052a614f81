import sys
from pathlib import Path

import numpy as np
import pytest
import torch

from text_classifier import InferenceError, LoadError, TFLiteEngine, TorchScriptEngine, load_engine

from .conftest import FakeInterpreter, KeywordModel


def test_tflite_engine_reports_shapes() -> None:
    engine = TFLiteEngine(FakeInterpreter(length=128, classes=3))
    assert engine.input_length == 128
    assert engine.num_classes == 3


def test_tflite_engine_adds_and_removes_batch_dimension() -> None:
    interpreter = FakeInterpreter(length=4)
    engine = TFLiteEngine(interpreter)
    scores = engine.infer([5, 9, 0, 0])
    assert interpreter.tensors[0].shape == (1, 4)
    assert interpreter.tensors[0].dtype == np.float32
    np.testing.assert_allclose(scores, [0.0, 1.0])


def test_tflite_engine_casts_to_input_dtype() -> None:
    interpreter = FakeInterpreter(length=2, dtype=np.int32)
    TFLiteEngine(interpreter).infer([1, 2])
    assert interpreter.tensors[0].dtype == np.int32


def test_tflite_engine_wraps_interpreter_errors() -> None:
    engine = TFLiteEngine(FakeInterpreter(length=4))
    with pytest.raises(InferenceError):
        engine.infer([1, 2, 3])


def test_tflite_from_file_missing(tmp_path: Path) -> None:
    with pytest.raises(LoadError):
        TFLiteEngine.from_file(tmp_path / "missing.tflite")


def test_tflite_from_file_without_tensorflow(tmp_path: Path, monkeypatch) -> None:
    path = tmp_path / "model.tflite"
    path.write_bytes(b"not a model")
    monkeypatch.setitem(sys.modules, "tensorflow", None)
    with pytest.raises(LoadError):
        TFLiteEngine.from_file(path)


def test_torchscript_engine_runs_module() -> None:
    engine = TorchScriptEngine(KeywordModel(positive_id=7), device="cpu")
    np.testing.assert_allclose(engine.infer([7, 0, 0]), [0.0, 1.0])
    np.testing.assert_allclose(engine.infer([1, 2, 3]), [1.0, 0.0])


def test_torchscript_engine_unwraps_dict_outputs() -> None:
    class DictModel(torch.nn.Module):
        def forward(self, input_ids):
            return {"logits": torch.tensor([[0.3, 2.0]])}

    engine = TorchScriptEngine(DictModel(), device="cpu", num_classes=2)
    assert engine.num_classes == 2
    assert engine.input_length is None
    np.testing.assert_allclose(engine.infer([1]), [0.3, 2.0])


def test_torchscript_engine_wraps_runtime_errors() -> None:
    class BrokenModel(torch.nn.Module):
        def forward(self, input_ids):
            raise RuntimeError("shape mismatch")

    engine = TorchScriptEngine(BrokenModel(), device="cpu")
    with pytest.raises(InferenceError):
        engine.infer([1, 2])


def test_torchscript_from_file(model_file: Path) -> None:
    engine = TorchScriptEngine.from_file(model_file, device="cpu")
    np.testing.assert_allclose(engine.infer([4, 0]), [0.0, 1.0])


def test_torchscript_from_file_rejects_garbage(tmp_path: Path) -> None:
    path = tmp_path / "model.pt"
    path.write_bytes(b"definitely not a torchscript archive")
    with pytest.raises(LoadError):
        TorchScriptEngine.from_file(path, device="cpu")


def test_load_engine_picks_type_from_suffix(model_file: Path) -> None:
    engine = load_engine(model_file, device="cpu", num_classes=2)
    assert isinstance(engine, TorchScriptEngine)
    assert engine.num_classes == 2


def test_load_engine_rejects_unknown_types(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        load_engine(tmp_path / "model.onnx")
    with pytest.raises(ValueError):
        load_engine(tmp_path / "model.pt", model_type="onnx")


def test_torchscript_engine_dict_without_logits_is_an_inference_error() -> None:
    class ScoresDictModel(torch.nn.Module):
        def forward(self, input_ids):
            return {"scores": torch.tensor([[0.3, 0.7]])}

    engine = TorchScriptEngine(ScoresDictModel(), device="cpu")
    with pytest.raises(InferenceError):
        engine.infer([1, 2])


def test_torchscript_engine_rejects_unbatched_output() -> None:
    class UnbatchedModel(torch.nn.Module):
        def forward(self, input_ids):
            return torch.tensor([0.1, 0.9])

    engine = TorchScriptEngine(UnbatchedModel(), device="cpu")
    with pytest.raises(InferenceError):
        engine.infer([1, 2])


def test_torchscript_engine_rejects_multi_row_output() -> None:
    class TwoRowModel(torch.nn.Module):
        def forward(self, input_ids):
            return torch.tensor([[0.1, 0.9], [0.8, 0.2]])

    engine = TorchScriptEngine(TwoRowModel(), device="cpu")
    with pytest.raises(InferenceError):
        engine.infer([1, 2])


def test_torchscript_engine_rejects_non_tensor_output() -> None:
    class ListOfFloatsModel(torch.nn.Module):
        def forward(self, input_ids):
            return [0.1, 0.9]

    engine = TorchScriptEngine(ListOfFloatsModel(), device="cpu")
    with pytest.raises(InferenceError):
        engine.infer([1, 2])
