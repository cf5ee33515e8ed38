[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "schedai"
version = "0.1.0"
description = "A command-line schedule manager that keeps events in a local JSON file and refuses overlapping bookings"
requires-python = ">=3.11"
keywords = ["schedule", "calendar", "events", "planner", "cli"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Natural Language :: Japanese",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Office/Business :: Scheduling",
]
dependencies = [
    "termcolor",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
schedai = "schedai.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["schedai"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py311"

[tool.mypy]
python_version = "3.11"
warn_unused_ignores = true
