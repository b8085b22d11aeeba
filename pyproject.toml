[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "kbdlayout"
version = "0.1.0"
description = "Ngram statistics, metric result aggregation and layout permutation search for keyboard layout optimization"
requires-python = ">=3.10"
keywords = [
    "keyboard",
    "layout",
    "ngrams",
    "optimization",
    "simulated-annealing",
    "genetic-algorithm",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Information Analysis",
]
dependencies = [
    "pyyaml",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["kbdlayout"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
