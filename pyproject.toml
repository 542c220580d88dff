[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "migren"
version = "0.1.1"
description = "Small migration tool for relational databases."
requires-python = ">=3.10"
keywords = ["sql", "db", "database", "migrations", "migren"]
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
    "Topic :: Database",
]
dependencies = [
    "sqlalchemy>=2.0",
    "python-dotenv>=1.0",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
]

[project.scripts]
migren = "migren.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["migren"]

[tool.pytest.ini_options]
addopts = "-ra"
