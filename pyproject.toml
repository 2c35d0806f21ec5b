[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "frsana"
version = "0.1.0"
description = "Calibration and analysis steps for fragment-separator detectors: multi-wire chambers, SEETRAM counters, spill rates and S2-S4 identification"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "nuclear physics",
    "fragment separator",
    "calibration",
    "particle identification",
    "seetram",
    "multi-wire chamber",
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
    "Topic :: Scientific/Engineering :: Physics",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["frsana"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
