[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "toycnn"
version = "0.1.0"
description = "A small convolutional network for MNIST digits, with a line-buffer convolution model and per-stage timing"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = ["cnn", "mnist", "convolution", "inference", "line buffer"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Education",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Artificial Intelligence",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["toycnn"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
