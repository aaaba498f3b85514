[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "logtailer"
version = "0.1.0"
description = "Log record splitting, content matching, routing and configuration for log tailing, with small helper commands."
requires-python = ">=3.10"
dependencies = [
    "pyyaml",
]
keywords = ["log", "tail", "logging", "filter", "router", "wildcard", "config"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: System Administrators",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Logging",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
logtailer-dingmock = "logtailer.dingmock:main"
logtailer-logrecorder = "logtailer.logrecorder:main"
logtailer-pstop = "logtailer.pstop:main"

[tool.hatch.build.targets.wheel]
packages = ["logtailer"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
