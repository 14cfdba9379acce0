"""Diagnostics for loaded TensorFlow graphs and tensors.

Everything here only logs or inspects; none of it is needed for inference.
"""
from typing import Any, List, Mapping

import tensorflow as tf
from loguru import logger


_NORMALIZATION_HINTS = ("normalization", "normalize", "preprocessing", "divide", "div", "scale")
_SCAN_DEPTH = 20


def log_signatures(signatures: Mapping[str, Any]) -> None:
    """Log key, inputs and outputs of every signature in a SavedModel."""
    for key, fn in signatures.items():
        structured_in = getattr(fn, "structured_input_signature", None)
        inputs = dict(structured_in[1]) if structured_in else {}
        outputs = getattr(fn, "structured_outputs", {}) or {}
        logger.info(f"[tf_diagnostics] signature available: {key}")
        logger.info(f"[tf_diagnostics]   inputs: {_describe_specs(inputs)}")
        logger.info(f"[tf_diagnostics]   outputs: {_describe_specs(outputs)}")


def _describe_specs(specs: Mapping[str, Any]) -> dict:
    described = {}
    for name, spec in specs.items():
        dtype = getattr(spec, "dtype", None)
        shape = getattr(spec, "shape", None)
        described[name] = f"{dtype.name if dtype is not None else '?'}{shape if shape is not None else ''}"
    return described


def _graph_operations(handle: Any) -> list:
    graph = getattr(handle.fn, "graph", None)
    if graph is None:
        return []
    return list(graph.get_operations())


def list_operations(handle: Any) -> List[str]:
    """Return (and log) every operation of the bound signature's graph."""
    if handle is None:
        logger.error("[tf_diagnostics] cannot list operations: model is None")
        return []

    operations = []
    for op in _graph_operations(handle):
        operations.append(f"{op.name} (type: {op.type})")
        for inp in op.inputs:
            logger.debug(f"[tf_diagnostics]   input of {op.name}: {inp.name}")
    logger.info(f"[tf_diagnostics] model operations ({len(operations)}): {operations}")
    return operations


def analyze_tensor(tensor: Any, name: str) -> None:
    """Log dtype, shape and element count of a tensor. Never raises."""
    if tensor is None:
        logger.error(f"[tf_diagnostics] tensor {name} is None")
        return
    try:
        tensor = tf.convert_to_tensor(tensor)
        logger.info(f"[tf_diagnostics] tensor {name}: dtype={tensor.dtype.name}, shape={tensor.shape.as_list()}")
        logger.info(f"[tf_diagnostics] tensor {name} element count: {int(tf.size(tensor))}")
    except (TypeError, ValueError) as e:
        logger.error(f"[tf_diagnostics] failed to analyze tensor {name}: {e}")


def _is_const_255(op: Any) -> bool:
    try:
        value = tf.make_ndarray(op.get_attr("value"))
    except (ValueError, TypeError) as e:
        logger.debug(f"[tf_diagnostics] unreadable constant {op.name}: {e}")
        return False
    return value.size == 1 and float(value.reshape(-1)[0]) == 255.0


def expects_normalized_inputs(handle: Any) -> bool:
    """Guess whether a graph normalizes its input itself.

    Scans the first operations for normalization-like names/types or a scalar 255 constant.
    """
    if handle is None:
        logger.error("[tf_diagnostics] cannot analyze normalization: model is None")
        return False

    for op in _graph_operations(handle)[:_SCAN_DEPTH]:
        op_name = op.name.lower()
        op_type = op.type.lower()
        for hint in _NORMALIZATION_HINTS:
            if hint in op_name or hint in op_type:
                logger.info(f"[tf_diagnostics] model seems to normalize its input (operation: {op.name})")
                return True
        if op_type == "const" and _is_const_255(op):
            logger.info(f"[tf_diagnostics] model seems to normalize its input (constant 255: {op.name})")
            return True

    logger.info("[tf_diagnostics] model does not seem to normalize its input")
    return False
