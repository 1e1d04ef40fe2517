[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "aibird"
version = "0.1.0"
description = "Building blocks for an AI-assisted IRC bot: user, channel and network state, command help and routing, workflow metadata, a key-value store and file uploads."
requires-python = ">=3.11"
keywords = ["irc", "bot", "comfyui", "chat", "ai"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Communications :: Chat :: Internet Relay Chat",
]
dependencies = [
    "requests>=2.28",
    "pillow>=9.0",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
    "responses>=0.23",
]

[tool.hatch.build.targets.wheel]
packages = ["aibird"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py311"

[tool.ruff.lint]
select = ["E", "F", "I", "B", "UP"]

[tool.mypy]
python_version = "3.11"
warn_unused_ignores = true
