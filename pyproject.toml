[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "flashftl"
version = "0.1.0"
description = "A block-mapping flash translation layer over a file-backed NAND flash image"
requires-python = ">=3.10"
dependencies = []
keywords = ["flash", "ftl", "nand", "block mapping", "storage", "simulation"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Filesystems",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
flashftl = "flashftl.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["flashftl"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
