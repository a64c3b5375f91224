[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pstatebalance"
version = "0.1.0"
description = "Markov models of energy-aware load balancing between two multi-server queues with P-state power levels"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = [
    "markov-chain",
    "queueing",
    "load-balancing",
    "energy",
    "p-state",
    "gth",
    "stationary-distribution",
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
    "Topic :: Scientific/Engineering :: Mathematics",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
pstatebalance-generate = "pstatebalance.generator:main"
pstatebalance-gth = "pstatebalance.gth:main"
pstatebalance-tgf = "pstatebalance.tgf:main"
pstatebalance-heatmap = "pstatebalance.heatmap:main"

[tool.hatch.build.targets.wheel]
packages = ["pstatebalance"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]
