[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "kmapkit"
version = "0.1.0"
description = "Sequence-mapping building blocks: FASTA/FASTQ reading, range-minimum trees, sorting helpers and spliced alignment"
requires-python = ">=3.10"
dependencies = []
keywords = ["bioinformatics", "alignment", "fasta", "fastq", "splicing", "cigar", "avl-tree"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Bio-Informatics",
]

[project.optional-dependencies]
test = ["pytest", "hypothesis"]

[tool.hatch.build.targets.wheel]
packages = ["kmapkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
