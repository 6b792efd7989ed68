"""Thought Dump: anonymous topic-based discussion API."""

__version__ = "0.1.0"
