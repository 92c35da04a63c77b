[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "twixtai"
version = "0.1.0"
description = "TwixT rules, a Monte Carlo tree search opponent, game-record parsing and Zobrist pattern statistics"
requires-python = ">=3.10"
dependencies = []
keywords = ["twixt", "board game", "monte carlo tree search", "mcts", "game ai", "zobrist"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: X11 Applications",
    "Intended Audience :: End Users/Desktop",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Board Games",
    "Topic :: Scientific/Engineering :: Artificial Intelligence",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
twixtai = "twixtai.gui:main"

[tool.hatch.build.targets.wheel]
packages = ["twixtai"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
