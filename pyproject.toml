[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "plater"
version = "1.1.0"
description = "3D-printer parts placer and plate generator"
requires-python = ">=3.10"
dependencies = []
keywords = ["3d-printing", "stl", "placement", "bin-packing", "plate"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
plater = "plater.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["plater"]

[tool.pytest.ini_options]
addopts = "-ra"
