[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "socker"
version = "0.1.0"
description = "A small TCP/UDP console client and server that exchange length-prefixed messages"
requires-python = ">=3.10"
dependencies = []
keywords = ["socket", "tcp", "udp", "echo", "client", "server", "framing"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
socker-client = "socker.client:main"
socker-server = "socker.server:main"

[tool.hatch.build.targets.wheel]
packages = ["socker"]

[tool.pytest.ini_options]
addopts = "-ra"
