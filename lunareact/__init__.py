"""Scope graphs, planning helpers, loop safety, context selection and an LLM client for code-aware agents."""

__version__ = "0.1.0"