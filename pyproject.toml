[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "funnygame"
version = "0.1.0"
description = "A small terminal arcade game: move around the board and collect apples before the clock runs out."
requires-python = ">=3.10"
dependencies = []
keywords = ["game", "terminal", "arcade", "ansi", "apples"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: POSIX",
    "Operating System :: MacOS",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Arcade",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
funnygame = "funnygame.game:main"

[tool.hatch.build.targets.wheel]
packages = ["funnygame"]

[tool.pytest.ini_options]
addopts = "-ra"
