[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "influxwriter"
version = "2.10.0"
description = "Batched line-protocol writes to InfluxDB 2 with a bounded retry queue, exponential back-off and gzip bodies"
requires-python = ">=3.10"
dependencies = []
keywords = ["influxdb", "time-series", "line-protocol", "retry", "batching", "gzip"]
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
    "Topic :: Database :: Front-Ends",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["influxwriter"]

[tool.hatch.build.targets.sdist]
include = ["influxwriter", "tests"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
