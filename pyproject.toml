[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "daxclient"
version = "0.1.0"
description = "Client-side helpers for a DynamoDB accelerator: error mapping, retry rules, projections, request options and legacy parameter translation"
requires-python = ">=3.10"
dependencies = []
keywords = ["dynamodb", "dax", "cache", "database", "client", "expressions"]
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
    "Topic :: Database",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["daxclient"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
