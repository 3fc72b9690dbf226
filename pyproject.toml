[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "f06kit"
version = "0.1.0"
description = "Data model, merging, comparison and extraction of result blocks from Nastran-style F06 output files"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = ["nastran", "f06", "finite elements", "fea", "mystran", "simcenter"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["f06kit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
