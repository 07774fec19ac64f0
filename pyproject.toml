[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "repaddu"
version = "0.1.0"
description = "Scan a source repository, filter and group its files, and write them out as a JSONL dataset or a browsable HTML page."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "repository",
    "source code",
    "documentation",
    "dataset",
    "jsonl",
    "pii redaction",
    "code report",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Documentation",
    "Topic :: Text Processing :: Filters",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["repaddu"]

[tool.hatch.build.targets.sdist]
include = ["repaddu", "tests", "README.md", "pyproject.toml"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
