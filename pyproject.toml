[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pagestore"
version = "0.1.0"
description = "Paged file storage with an LRU buffer pool, schema metadata and transaction records for a small relational engine"
requires-python = ">=3.10"
dependencies = []
keywords = ["database", "storage", "buffer-pool", "pages", "metadata", "lru"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database :: Database Engines/Servers",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["pagestore"]

[tool.pytest.ini_options]
addopts = "-ra"
