[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "inboxfetch"
version = "0.1.0"
description = "Download every message in an IMAP inbox to .eml files over concurrent TLS connections"
requires-python = ">=3.10"
keywords = ["imap", "email", "backup", "eml", "asyncio", "gmail"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Framework :: AsyncIO",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Communications :: Email :: Post-Office :: IMAP",
    "Topic :: System :: Archiving :: Backup",
]
dependencies = []

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
]

[project.scripts]
inboxfetch = "inboxfetch.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["inboxfetch"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
