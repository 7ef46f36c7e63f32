"""Reference layers of the network: convolution, ReLU, flatten, dense, argmax."""

from __future__ import annotations

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view


def relu(x):
    """Rectified linear unit; scalars give a float, arrays give an array."""
    arr = np.asarray(x)
    if not np.issubdtype(arr.dtype, np.floating):
        arr = arr.astype(np.float32)
    out = np.where(arr > 0, arr, arr.dtype.type(0))
    return float(out) if out.ndim == 0 else out


def conv2d(image, kernels, biases) -> np.ndarray:
    """Valid, stride-1 convolution of a 2-D image with each kernel, plus bias and ReLU.

    Returns an array of shape (kernels, rows - kh + 1, cols - kw + 1).
    """
    img = np.asarray(image, dtype=np.float32)
    ker = np.asarray(kernels, dtype=np.float32)
    bias = np.asarray(biases, dtype=np.float32)
    if img.ndim != 2:
        raise ValueError("image must be two-dimensional")
    if ker.ndim != 3:
        raise ValueError("kernels must have shape (count, rows, cols)")
    if bias.shape != (ker.shape[0],):
        raise ValueError("one bias is needed per kernel")
    if img.shape[0] < ker.shape[1] or img.shape[1] < ker.shape[2]:
        raise ValueError("image is smaller than the kernel")

    windows = sliding_window_view(img, ker.shape[1:])
    sums = np.einsum("ijab,kab->kij", windows, ker) + bias[:, None, None]
    return relu(sums.astype(np.float32))


def flatten(feature_map) -> np.ndarray:
    """Flatten a (kernel, row, col) feature map into one vector, kernel-major."""
    return np.asarray(feature_map, dtype=np.float32).reshape(-1)


def fc(flat, weights, biases) -> np.ndarray:
    """Fully connected layer: ``weights @ flat + biases`` with no activation."""
    x = np.asarray(flat, dtype=np.float32)
    w = np.asarray(weights, dtype=np.float32)
    b = np.asarray(biases, dtype=np.float32)
    if x.ndim != 1 or w.ndim != 2:
        raise ValueError("expected a vector input and a 2-D weight matrix")
    if w.shape[1] != x.shape[0]:
        raise ValueError(f"weights expect {w.shape[1]} inputs, got {x.shape[0]}")
    if b.shape != (w.shape[0],):
        raise ValueError("one bias is needed per output")
    return (w @ x + b).astype(np.float32)


def argmax(logits) -> int:
    """Index of the largest value; the first one wins a tie."""
    values = np.asarray(logits).ravel()
    if values.size == 0:
        raise ValueError("argmax of an empty sequence")
    best_index, best_value = 0, values[0]
    for index, value in enumerate(values[1:], start=1):
        if value > best_value:
            best_index, best_value = index, value
    return best_index