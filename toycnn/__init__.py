"""Small MNIST convolutional network with a line-buffer convolution model and accuracy evaluation."""

__version__ = "0.1.0"
__all__ = ["weights", "layers", "linebuffer", "evaluate"]