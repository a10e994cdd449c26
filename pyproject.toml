[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mapfviz"
version = "0.1.0"
description = "Visualizer for multi-agent path finding plans on grid maps, with optional safe-zone overlays"
requires-python = ">=3.10"
keywords = ["mapf", "multi-agent", "path finding", "visualization", "grid", "pygame"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: X11 Applications",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Visualization",
]
dependencies = [
    "pygame",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
mapf-visualizer = "mapfviz.app:main"

[tool.hatch.build.targets.wheel]
packages = ["mapfviz"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
