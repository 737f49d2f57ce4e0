[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "proofmarket"
version = "0.1.0"
description = "Provider-side library for a proof request market: parse and validate streamed proof requests, bid in the auction, run a gnark prover and resolve."
requires-python = ">=3.10"
keywords = ["zero-knowledge", "proofs", "marketplace", "provider", "auction", "server-sent-events"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: System :: Distributed Computing",
]
dependencies = [
    "requests",
]

[project.optional-dependencies]
test = [
    "pytest",
    "responses",
]

[tool.hatch.build.targets.wheel]
packages = ["proofmarket"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
