[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "awakenhero"
version = "0.1.0"
description = "A small top-down dungeon adventure with Tiled maps and UDP multiplayer"
requires-python = ">=3.10"
keywords = ["game", "dungeon", "tiled", "multiplayer", "pygame"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Role-Playing",
]
dependencies = [
    "pygame",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
awakenhero = "awakenhero.game:main"

[tool.hatch.build.targets.wheel]
packages = ["awakenhero"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
