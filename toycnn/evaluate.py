"""Reading MNIST test rows and measuring the network's accuracy on them."""

from __future__ import annotations

import re
import time
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field
from os import PathLike
from pathlib import Path

import numpy as np

from .layers import argmax, conv2d, fc, flatten
from .weights import IMG_SIZE, conv_bias, conv_kernels

_MIN_LINE_LENGTH = 10
_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")
_FLOAT_PREFIX = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")

STAGES = ("conv2d", "flatten", "fc")


def _leading_int(token: str) -> int:
    match = _INT_PREFIX.match(token)
    return int(match.group(1)) if match else 0


def _leading_float(token: str) -> float:
    match = _FLOAT_PREFIX.match(token)
    return float(match.group(1)) if match else 0.0


@dataclass(frozen=True)
class Sample:
    """One labelled image with pixel values scaled to [0, 1]."""

    label: int
    image: np.ndarray


def parse_mnist_line(line: str) -> Sample | None:
    """Parse one ``label,pixel,...`` row; return None for a line too short to hold a row.

    Empty fields are skipped, values parse leniently like their C counterparts,
    and a row with fewer than IMG_SIZE * IMG_SIZE pixels raises ValueError.
    """
    if len(line) < _MIN_LINE_LENGTH:
        return None
    tokens = iter(token for token in line.split(",") if token)
    first = next(tokens, None)
    if first is None:
        return None
    label = _leading_int(first)

    wanted = IMG_SIZE * IMG_SIZE
    pixels = []
    for token in tokens:
        pixels.append(_leading_float(token))
        if len(pixels) == wanted:
            break
    if len(pixels) < wanted:
        raise ValueError("invalid row: missing pixels")

    image = (np.array(pixels, dtype=np.float64) / 255.0).astype(np.float32)
    return Sample(label=label, image=image.reshape(IMG_SIZE, IMG_SIZE))


def read_mnist_csv(path: str | PathLike[str]) -> Iterator[Sample]:
    """Yield the samples of an MNIST CSV file in order, skipping short lines."""
    with Path(path).open("r", encoding="utf-8") as handle:
        for line in handle:
            sample = parse_mnist_line(line)
            if sample is not None:
                yield sample


ConvFunction = Callable[[np.ndarray, np.ndarray, np.ndarray], np.ndarray]


class Classifier:
    """The small CNN: one convolution layer, flatten, and a dense output layer."""

    def __init__(
        self,
        kernels=None,
        conv_biases=None,
        fc_weights=None,
        fc_biases=None,
        conv: ConvFunction | None = None,
    ) -> None:
        if fc_weights is None or fc_biases is None:
            raise ValueError("fully connected weights and biases are required")
        self.kernels = np.asarray(
            conv_kernels() if kernels is None else kernels, dtype=np.float32
        )
        self.conv_biases = np.asarray(
            conv_bias() if conv_biases is None else conv_biases, dtype=np.float32
        )
        self.fc_weights = np.asarray(fc_weights, dtype=np.float32)
        self.fc_biases = np.asarray(fc_biases, dtype=np.float32)
        self.conv = conv2d if conv is None else conv

    def predict(self, image) -> int:
        """Return the predicted class of one image."""
        return self.predict_timed(image)[0]

    def predict_timed(self, image) -> tuple[int, dict[str, int]]:
        """Return the predicted class and the nanoseconds spent in each stage."""
        t0 = time.perf_counter_ns()
        feature_map = self.conv(image, self.kernels, self.conv_biases)
        t1 = time.perf_counter_ns()
        flat = flatten(feature_map)
        t2 = time.perf_counter_ns()
        logits = fc(flat, self.fc_weights, self.fc_biases)
        t3 = time.perf_counter_ns()
        durations = {"conv2d": t1 - t0, "flatten": t2 - t1, "fc": t3 - t2}
        return argmax(logits), durations


@dataclass
class EvaluationResult:
    """Counts of an evaluation run and each stage's mean share of compute time."""

    correct: int = 0
    total: int = 0
    stage_shares: dict[str, float] = field(default_factory=lambda: dict.fromkeys(STAGES, 0.0))

    def accuracy(self) -> float:
        """Percentage of samples classified correctly."""
        if self.total == 0:
            raise ValueError("no samples were evaluated")
        return 100.0 * self.correct / self.total


def evaluate(
    samples: Iterable[Sample], classifier: Classifier, max_count: int = 0
) -> EvaluationResult:
    """Classify samples, stopping after ``max_count`` of them when it is not zero."""
    if max_count < 0:
        raise ValueError("max_count must not be negative")
    result = EvaluationResult()
    share_sums = dict.fromkeys(STAGES, 0.0)

    for sample in samples:
        prediction, durations = classifier.predict_timed(sample.image)
        if prediction == sample.label:
            result.correct += 1
        result.total += 1

        elapsed = sum(durations.values())
        if elapsed > 0:
            for stage, duration in durations.items():
                share_sums[stage] += duration / elapsed

        if max_count and result.total == max_count:
            break

    if result.total:
        result.stage_shares = {stage: value / result.total for stage, value in share_sums.items()}
    return result