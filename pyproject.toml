[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "hatter"
version = "0.1.0"
description = "Data structures and analyses for technology-mapped logic networks: bound chains, node storage, load and sensing-time trackers, window simulation and structural Verilog output."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "logic synthesis",
    "logic network",
    "technology mapping",
    "boolean functions",
    "truth tables",
    "verilog",
    "eda",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Electronic Design Automation (EDA)",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["hatter"]

[tool.hatch.build.targets.sdist]
include = ["hatter", "tests", "README.md"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
