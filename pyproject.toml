[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "vectorcanvas"
version = "0.1.0"
description = "2D canvas path geometry: paths, fill and stroke triangulation, gradient stops and shadows"
requires-python = ">=3.10"
dependencies = []
keywords = ["canvas", "vector", "path", "triangulation", "earcut", "stroke", "geometry"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Graphics",
    "Topic :: Scientific/Engineering :: Mathematics",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["vectorcanvas"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
