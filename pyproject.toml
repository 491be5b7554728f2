[build-system]
requires = ["setuptools>=61.0"]
build-backend = "setuptools.build_meta"

[project]
name = "ossim"
version = "0.1.0"
description = "A teaching simulator of an operating system: multi-level queue scheduling, a slot-driven timer and paged virtual memory with swapping."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "operating-system",
    "simulator",
    "scheduling",
    "paging",
    "virtual-memory",
    "education",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Education",
    "Environment :: Console",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Education",
    "Topic :: System :: Operating System",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
ossim = "ossim.simulator:main"
ossim-sum = "ossim.sumthreads:main"

[tool.setuptools.packages.find]
include = ["ossim*"]

[tool.pytest.ini_options]
addopts = "-ra"
