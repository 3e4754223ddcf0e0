[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "facetkit"
version = "0.1.0"
description = "Shape-driven reflection over Python values with JSON and MessagePack reading and writing"
requires-python = ">=3.10"
dependencies = []
keywords = ["reflection", "introspection", "json", "msgpack", "serialization", "deserialization"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Software Development :: Libraries",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["facetkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
