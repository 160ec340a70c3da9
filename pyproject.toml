[build-system]
requires = ["setuptools>=61.0"]
build-backend = "setuptools.build_meta"

[project]
name = "orchestraterm"
version = "0.2.0"
description = "Terminal key bindings, copy-mode selection, colour mapping and a persistent agent team task engine"
requires-python = ">=3.10"
dependencies = []
keywords = ["terminal", "keymap", "ansi", "copy-mode", "agents", "tasks"]
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
    "Topic :: Terminals :: Terminal Emulators/X Terminals",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.setuptools.packages.find]
include = ["orchestraterm*"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
