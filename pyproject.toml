[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "nrcli"
version = "0.1.0"
description = "Command-line helpers for New Relic: CLI configuration, agent value obfuscation, NR1 decoding and diagnostics"
requires-python = ">=3.10"
dependencies = []
keywords = ["newrelic", "monitoring", "observability", "cli", "diagnostics"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Monitoring",
    "Topic :: Utilities",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
nrcli = "nrcli.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["nrcli"]

[tool.pytest.ini_options]
testpaths = ["tests"]
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
