import numpy as np
import pytest

from toycnn import layers, weights


def test_relu_scalars():
    assert layers.relu(-1.0) == 0.0
    assert layers.relu(2.5) == 2.5
    assert layers.relu(0.0) == 0.0


def test_relu_array_keeps_shape():
    values = np.array([[-3.0, 4.0], [0.5, -0.5]], dtype=np.float32)
    out = layers.relu(values)
    assert out.shape == values.shape
    assert out.tolist() == [[0.0, 4.0], [0.5, 0.0]]


def test_relu_nan_becomes_zero():
    assert layers.relu(float("nan")) == 0.0


def test_conv2d_identity_kernel_crops_image():
    rng = np.random.default_rng(1)
    image = rng.uniform(0, 1, size=(6, 7)).astype(np.float32)
    kernel = np.zeros((1, 3, 3), dtype=np.float32)
    kernel[0, 1, 1] = 1.0
    out = layers.conv2d(image, kernel, [0.0])
    assert out.shape == (1, 4, 5)
    np.testing.assert_allclose(out[0], image[1:-1, 1:-1])


def test_conv2d_bias_and_relu():
    image = np.zeros((5, 5), dtype=np.float32)
    kernels = np.ones((2, 3, 3), dtype=np.float32)
    out = layers.conv2d(image, kernels, [0.75, -0.75])
    assert out.shape == (2, 3, 3)
    assert out[0].tolist() == [[0.75] * 3] * 3
    assert out[1].tolist() == [[0.0] * 3] * 3


def test_conv2d_with_trained_weights():
    rng = np.random.default_rng(2)
    image = rng.uniform(0, 1, size=(weights.IMG_SIZE, weights.IMG_SIZE))
    out = layers.conv2d(image, weights.conv_kernels(), weights.conv_bias())
    assert out.shape == (weights.NUM_KERNELS, weights.OUT_SIZE, weights.OUT_SIZE)
    assert float(out.min()) >= 0.0


def test_conv2d_rejects_bad_shapes():
    kernels = weights.conv_kernels()
    with pytest.raises(ValueError):
        layers.conv2d(np.zeros((2, 2)), kernels, weights.conv_bias())
    with pytest.raises(ValueError):
        layers.conv2d(np.zeros((28, 28)), kernels, [0.0])
    with pytest.raises(ValueError):
        layers.conv2d(np.zeros(28), kernels, weights.conv_bias())


def test_flatten_is_kernel_major():
    fm = np.arange(2 * 3 * 4, dtype=np.float32).reshape(2, 3, 4)
    flat = layers.flatten(fm)
    assert flat.shape == (24,)
    assert flat.tolist() == [float(v) for v in range(24)]
    assert flat[1 * 12 + 2 * 4 + 3] == fm[1, 2, 3]


def test_fc_selects_inputs():
    flat = np.array([2.0, -1.0, 5.0], dtype=np.float32)
    w = np.array([[1.0, 0.0, 0.0], [0.0, 0.0, 1.0]], dtype=np.float32)
    out = layers.fc(flat, w, [0.5, -0.5])
    assert out.tolist() == [2.5, 4.5]


def test_fc_zero_weights_give_biases():
    out = layers.fc(np.ones(weights.FC_IN), np.zeros((weights.FC_OUT, weights.FC_IN)), weights.fc_bias())
    np.testing.assert_array_equal(out, weights.fc_bias())


def test_fc_rejects_mismatch():
    with pytest.raises(ValueError):
        layers.fc(np.ones(3), np.ones((2, 4)), [0.0, 0.0])
    with pytest.raises(ValueError):
        layers.fc(np.ones(3), np.ones((2, 3)), [0.0])


def test_argmax():
    assert layers.argmax([0.1, 3.0, -2.0, 1.0]) == 1
    assert layers.argmax([5.0, 5.0, 1.0]) == 0
    assert layers.argmax([-4.0]) == 0


def test_argmax_empty():
    with pytest.raises(ValueError):
        layers.argmax([])