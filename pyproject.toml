[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mmkit"
version = "0.1.0"
description = "Building blocks for DNA read mapping: minimizer sketching, seed filtering, paired-end pairing, local alignment scoring and low-complexity masking"
requires-python = ">=3.10"
keywords = [
    "bioinformatics",
    "genomics",
    "minimizer",
    "dust",
    "smith-waterman",
    "paired-end",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Bio-Informatics",
]
dependencies = []

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
mmkit-sdust = "mmkit.sdust:main"

[tool.hatch.build.targets.wheel]
packages = ["mmkit"]

[tool.hatch.build.targets.sdist]
include = ["mmkit", "tests", "README.md", "pyproject.toml"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
