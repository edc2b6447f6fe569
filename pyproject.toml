[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "jstpserver"
version = "0.0.0"
description = "A small threaded TCP server speaking a length-prefixed JSON request/response protocol"
requires-python = ">=3.10"
dependencies = []
keywords = ["json", "tcp", "server", "protocol", "router"]
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
    "Topic :: Internet",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
jstpserver = "jstpserver.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["jstpserver"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
