"""Release packaging for the monaco-yaml language service."""

__version__ = "0.1.0"
