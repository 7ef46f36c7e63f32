"""Streaming convolution through a three-row line buffer with a fixed adder tree.

This mirrors the hardware accelerator's data path: pixels arrive one at a
time, each kernel's nine products are summed by a fixed tree, and ReLU is
applied to the result. All arithmetic is single precision.
"""

from __future__ import annotations

import numpy as np

from .layers import relu
from .weights import KERNEL_SIZE

_TAPS = KERNEL_SIZE * KERNEL_SIZE


def _adder_tree(products: np.ndarray, bias) -> np.ndarray:
    """Sum nine products and a bias in the accelerator's fixed order."""
    p = products
    sum1 = p[..., 0] + p[..., 1]
    sum2 = p[..., 2] + p[..., 3]
    sum3 = p[..., 4] + p[..., 5]
    sum4 = p[..., 6] + p[..., 7]
    sum5 = p[..., 8] + bias
    sum8 = (sum1 + sum2) + (sum3 + sum4)
    return sum5 + sum8


def cmac_unit(window, kernel, bias) -> float:
    """Multiply a 3x3 window by a 3x3 kernel and add the bias, before ReLU."""
    w = np.asarray(window, dtype=np.float32)
    k = np.asarray(kernel, dtype=np.float32)
    if w.shape != (KERNEL_SIZE, KERNEL_SIZE) or k.shape != (KERNEL_SIZE, KERNEL_SIZE):
        raise ValueError(f"window and kernel must both be {KERNEL_SIZE}x{KERNEL_SIZE}")
    products = (w * k).reshape(_TAPS)
    return float(_adder_tree(products, np.float32(bias)))


def conv_linebuffer(image, kernels, biases) -> np.ndarray:
    """Convolve an image with 3x3 kernels by streaming it through a line buffer.

    Returns a ReLU-activated feature map of shape (kernels, rows - 2, cols - 2).
    """
    img = np.asarray(image, dtype=np.float32)
    ker = np.asarray(kernels, dtype=np.float32)
    bias = np.asarray(biases, dtype=np.float32)
    if img.ndim != 2:
        raise ValueError("image must be two-dimensional")
    if ker.ndim != 3 or ker.shape[1:] != (KERNEL_SIZE, KERNEL_SIZE):
        raise ValueError(f"kernels must have shape (count, {KERNEL_SIZE}, {KERNEL_SIZE})")
    if bias.shape != (ker.shape[0],):
        raise ValueError("one bias is needed per kernel")
    rows, cols = img.shape
    if rows < KERNEL_SIZE or cols < KERNEL_SIZE:
        raise ValueError("image is smaller than the kernel")

    flat_kernels = ker.reshape(ker.shape[0], _TAPS)
    linebuffer = np.zeros((KERNEL_SIZE, cols), dtype=np.float32)
    feature_map = np.empty(
        (ker.shape[0], rows - KERNEL_SIZE + 1, cols - KERNEL_SIZE + 1), dtype=np.float32
    )
    edge = KERNEL_SIZE - 1

    for row, pixels in enumerate(img):
        for col, pixel in enumerate(pixels):
            linebuffer[:-1, col] = linebuffer[1:, col].copy()
            linebuffer[-1, col] = pixel
            if row >= edge and col >= edge:
                window = linebuffer[:, col - edge : col + 1].reshape(_TAPS)
                acc = _adder_tree(flat_kernels * window, bias)
                feature_map[:, row - edge, col - edge] = relu(acc)
    return feature_map