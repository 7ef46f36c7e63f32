"""Network dimensions, the trained parameters, and readers for C-style weight arrays."""

from __future__ import annotations

import re
from os import PathLike
from pathlib import Path

import numpy as np

IMG_SIZE = 28
KERNEL_SIZE = 3
NUM_KERNELS = 8
STRIDE = 1
OUT_SIZE = IMG_SIZE - KERNEL_SIZE + 1
FC_IN = NUM_KERNELS * OUT_SIZE * OUT_SIZE
FC_OUT = 10

# Shape (8, 1, 3, 3), stored kernel-major, row-major.
_CONV_WEIGHTS = (
    -0.11192025244235992, -0.4745863080024719, 0.05682967230677605, 0.5396634936332703,
    0.4097725749015808, 0.4260862171649933, -0.5265617370605469, 0.3074890971183777,
    -0.26532939076423645, 0.8392466306686401, 0.08191145211458206, -0.9929786920547485,
    0.14594946801662445, 0.13186699151992798, -0.798391580581665, 0.29536914825439453,
    0.948932945728302, 0.7279788851737976, 0.36157846450805664, -0.7068883180618286,
    0.4989069104194641, 0.45738381147384644, -0.16778601706027985, 0.41785454750061035,
    0.23437145352363586, -0.8410165905952454, 0.49321794509887695, -0.638456404209137,
    -1.2906490564346313, -1.1824204921722412, 1.0252735614776611, 0.8235995769500732,
    -0.17510487139225006, 0.27417483925819397, 0.4024538993835449, 0.49832722544670105,
    -1.1833807229995728, -0.2812875509262085, 0.4835232198238373, 0.1449669748544693,
    0.932407796382904, 0.6139640808105469, 0.6257073283195496, -0.17082355916500092,
    -0.8160739541053772, -0.2987368702888489, -0.4690091609954834, 0.3561251759529114,
    -1.196718692779541, 0.5691993236541748, 0.7647666335105896, 0.18900789320468903,
    0.4294317066669464, -0.5548268556594849, 0.08210588246583939, 0.08806103467941284,
    -0.5087058544158936, 0.8693053126335144, 0.5142475962638855, -1.2518728971481323,
    0.9246081709861755, 0.01912674307823181, -1.1105475425720215, 0.801459789276123,
    0.6365167498588562, 0.8501400351524353, -0.12190346419811249, 0.34955552220344543,
    -0.05868006497621536, -1.4854012727737427, -1.4165685176849365, -1.6440184116363525,
)

_CONV_BIASES = (
    -0.1518043577671051, -0.7903362512588501, -0.17985619604587555, 0.0015471827937290072,
    -0.21453030407428741, -0.07125218957662582, -0.013305744156241417, 0.1373489797115326,
)

_FC_BIASES = (
    0.024303589016199112, 0.24879257380962372, -0.010825010016560555, -0.08280997723340988,
    0.013964282348752022, 0.06834404170513153, -0.019304489716887474, 0.09459448605775833,
    -0.1692715585231781, -0.08600907772779465,
)

_BLOCK_COMMENT = re.compile(r"/\*.*?\*/", re.DOTALL)
_LINE_COMMENT = re.compile(r"//[^\n]*")
_DECLARED_SIZE = re.compile(r"\[\s*(\d+)\s*\]\s*=\s*\{")


def _parse_number(token: str) -> float:
    try:
        return float(token)
    except ValueError:
        pass
    if token[-1] in "fF":
        try:
            return float(token[:-1])
        except ValueError:
            pass
    raise ValueError(f"not a number: {token!r}")


def parse_float_array(text: str) -> np.ndarray:
    """Parse a C float array initialiser (or a bare comma list) into a float32 vector.

    Comments are ignored, a trailing ``f`` suffix is accepted, and if the
    declaration states a size, the number of values must match it.
    """
    body = _LINE_COMMENT.sub("", _BLOCK_COMMENT.sub("", text))
    declared = None
    if "{" in body:
        match = _DECLARED_SIZE.search(body)
        if match:
            declared = int(match.group(1))
        start = body.index("{")
        end = body.find("}", start)
        if end < 0:
            raise ValueError("unterminated array initialiser")
        body = body[start + 1 : end]

    values = [_parse_number(token) for token in (t.strip() for t in body.split(",")) if token]
    if declared is not None and declared != len(values):
        raise ValueError(f"array declares {declared} values but holds {len(values)}")
    return np.array(values, dtype=np.float32)


def load_float_array(path: str | PathLike[str]) -> np.ndarray:
    """Read a file holding a C float array and return its values."""
    return parse_float_array(Path(path).read_text(encoding="utf-8"))


def conv_kernels() -> np.ndarray:
    """Return the convolution kernels, shape (NUM_KERNELS, KERNEL_SIZE, KERNEL_SIZE)."""
    return np.array(_CONV_WEIGHTS, dtype=np.float32).reshape(NUM_KERNELS, KERNEL_SIZE, KERNEL_SIZE)


def conv_bias() -> np.ndarray:
    """Return the convolution biases, one per kernel."""
    return np.array(_CONV_BIASES, dtype=np.float32)


def fc_bias() -> np.ndarray:
    """Return the fully connected layer biases, one per class."""
    return np.array(_FC_BIASES, dtype=np.float32)


def load_fc_weights(path: str | PathLike[str]) -> np.ndarray:
    """Read the fully connected weights from a C array file, shape (FC_OUT, FC_IN)."""
    values = load_float_array(path)
    expected = FC_OUT * FC_IN
    if values.size != expected:
        raise ValueError(f"expected {expected} fully connected weights, found {values.size}")
    return values.reshape(FC_OUT, FC_IN)