"""Inquiry complex engine: recursive argumentation graphs grown by an LLM."""

__version__ = "0.1.0"
