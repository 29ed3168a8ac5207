[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gridplan"
version = "0.1.0"
description = "Grid-based global path planning (A*, Dijkstra) over inflation and log-odds occupancy maps"
requires-python = ">=3.10"
dependencies = []
keywords = ["path planning", "a-star", "dijkstra", "occupancy grid", "robotics", "any-angle"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Artificial Intelligence",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
gridplan = "gridplan.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["gridplan"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
