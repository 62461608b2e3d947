[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "polynotifier"
version = "0.1.0"
description = "Price alerts for prediction markets: rule evaluation, cooldowns, a chat-bot conversation model and an admin HTTP API."
requires-python = ">=3.10"
keywords = ["prediction-markets", "alerts", "notifications", "chat-bot", "admin-api", "flask"]
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
    "Framework :: Flask",
    "Topic :: Communications :: Chat",
]
dependencies = [
    "flask>=2.2",
]

[project.optional-dependencies]
test = [
    "pytest>=7",
]

[tool.hatch.build.targets.wheel]
packages = ["polynotifier"]

[tool.hatch.build.targets.sdist]
include = ["polynotifier", "tests", "pyproject.toml", "README.md"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
