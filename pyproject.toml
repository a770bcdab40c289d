[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "canstudio"
version = "0.1.0"
description = "Headless raw CAN frame sender and viewer components for CAN bus simulation"
requires-python = ">=3.10"
dependencies = []
keywords = ["can", "canbus", "simulation", "frames", "sender", "viewer"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Software Development :: Embedded Systems :: Controller Area Network (CAN)",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["canstudio"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
