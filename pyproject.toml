[build-system]
requires = ["setuptools>=61"]
build-backend = "setuptools.build_meta"

[project]
name = "microcluster"
version = "0.1.0"
description = "SQL statement registry, cluster member and join token tables, daemon configuration and cluster query helpers"
requires-python = ">=3.10"
dependencies = [
    "pyyaml",
]
keywords = ["cluster", "sqlite", "dqlite", "daemon", "membership", "join-token"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Distributed Computing",
    "Topic :: Database",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.setuptools.packages.find]
include = ["microcluster*"]

[tool.pytest.ini_options]
addopts = "-ra"
