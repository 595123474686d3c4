[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "metaplaycli"
version = "0.1.0"
description = "Helpers for checking tools, reading pod logs and preparing deployments of Metaplay game servers"
requires-python = ">=3.10"
dependencies = [
    "packaging",
]
keywords = [
    "docker",
    "dotnet",
    "helm",
    "kubernetes",
    "game-server",
    "deployment",
    "logs",
    "jwt",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Build Tools",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["metaplaycli"]

[tool.hatch.build.targets.sdist]
include = [
    "metaplaycli",
    "tests",
]

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
