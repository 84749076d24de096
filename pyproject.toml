[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "hpingtools"
version = "0.1.0"
description = "Packet analysis helpers: APD packet descriptions, option parsing, scan reporting, RTT tracking and a small bignum toolkit"
requires-python = ">=3.10"
dependencies = []
keywords = ["networking", "packets", "tcp", "icmp", "scanner", "bignum", "apd"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: System Administrators",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking :: Monitoring",
    "Topic :: Scientific/Engineering :: Mathematics",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["hpingtools"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"
