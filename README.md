# toycnn

A tiny convolutional network that classifies handwritten digits from the
MNIST test set in CSV form. The network has one 3×3 convolution layer with
eight kernels and ReLU, a flatten step, and one fully connected layer with
ten outputs.

The package has two convolution implementations. Both return matching
feature maps:

- `toycnn.layers.conv2d` is a plain sliding-window convolution.
- `toycnn.linebuffer.conv_linebuffer` models a streaming design. It feeds
  pixels one at a time through a three-row line buffer. Each kernel's nine
  products and its bias are summed in a fixed adder-tree order, the same
  order that `toycnn.linebuffer.cmac_unit` uses for a single window. All
  arithmetic is single precision.

## Installation

```
pip install .
```

To install the test dependencies as well:

```
pip install .[test]
```

## Weights

`toycnn.weights` defines the network dimensions: `IMG_SIZE`, `KERNEL_SIZE`,
`NUM_KERNELS`, `OUT_SIZE`, `FC_IN` and `FC_OUT`.

Some trained parameters are built into the package:

- `conv_kernels()` returns the convolution kernels, with shape (8, 3, 3).
- `conv_bias()` returns the eight convolution biases.
- `fc_bias()` returns the ten fully connected biases.

The fully connected weight matrix, of shape 10 × 5408, is not built in.
`load_fc_weights(path)` reads it from a file that holds a C-style float
array and checks the number of values.

Two functions read any such array:

- `parse_float_array(text)` parses the text.
- `load_float_array(path)` reads the text from a file.

Both ignore comments and accept a trailing `f` suffix. They raise
`ValueError` if the size given in the declaration does not match the number
of values.

## Layers

`toycnn.layers` provides the building blocks:

- `relu`
- `conv2d`
- `flatten`
- `fc`
- `argmax`, which returns the first index when values tie.

## Evaluation

```python
from toycnn.weights import conv_kernels, conv_bias, fc_bias, load_fc_weights
from toycnn.layers import conv2d
from toycnn.evaluate import Classifier, read_mnist_csv, evaluate

classifier = Classifier(conv_kernels(), conv_bias(),
                        load_fc_weights("fc_weights.hpp"), fc_bias(), conv2d)
result = evaluate(read_mnist_csv("mnist_test.csv"), classifier, 0)
print(result.correct, result.total, result.accuracy())
print(result.stage_shares)
```

### Reading the CSV file

Each CSV row holds the label followed by 784 pixel values from 0 to 255.
`read_mnist_csv` yields `Sample` objects and `parse_mnist_line` parses a
single row. When a row is read:

- Pixels are scaled to the range [0, 1].
- Lines shorter than ten characters are skipped.
- A row with missing pixels raises `ValueError`.

### The classifier

The `conv` argument of `Classifier` chooses the convolution. Pass
`conv_linebuffer` to run the streaming model instead of `conv2d`.

Two methods classify an image:

- `Classifier.predict(image)` returns the predicted class.
- `Classifier.predict_timed(image)` also returns the nanoseconds spent in
  each stage: `conv2d`, `flatten` and `fc`.

### Results

`evaluate(samples, classifier, max_count)` classifies every sample when
`max_count` is 0. Any other value stops after that many samples.

The returned `EvaluationResult` holds:

- the `correct` and `total` counts
- `accuracy()`, a percentage, which raises `ValueError` when no samples
  were evaluated
- `stage_shares`, the mean fraction of compute time each stage took per
  image.

## What it does not do

The package has no command-line program. It does not print a formatted
timing report. It does not time image loading separately from the network
stages. Run evaluations from Python as shown above.