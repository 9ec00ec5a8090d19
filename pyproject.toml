[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "geovt"
version = "0.1.1"
description = "Slice GeoJSON data into vector tiles on the fly"
requires-python = ">=3.10"
dependencies = []
keywords = ["geojson", "vector tiles", "tiling", "gis", "mercator", "clipping", "simplification"]
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
    "Topic :: Scientific/Engineering :: GIS",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["geovt"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
