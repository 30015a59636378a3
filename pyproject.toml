[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "boshutils"
version = "0.1.0"
description = "System utilities: command runner interfaces and fakes, a file system abstraction, UUID generation, worker pools and IPv4 helpers"
requires-python = ">=3.10"
dependencies = []
keywords = ["filesystem", "fakes", "testing", "worker-pool", "uuid", "ipv4"]
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
    "Topic :: Software Development :: Libraries",
    "Topic :: Software Development :: Testing :: Mocking",
    "Topic :: System :: Filesystems",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["boshutils"]

[tool.pytest.ini_options]
addopts = "-ra"
