[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "lunareact"
version = "0.1.0"
description = "Lexical scope graphs, context selection and ReAct planning helpers for code-aware LLM agents"
requires-python = ">=3.10"
dependencies = []
keywords = ["react", "agent", "llm", "scope-graph", "code-search", "context"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["lunareact"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
