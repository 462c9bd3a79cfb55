"""gitok — clone just the part of a Git repository you need."""

__version__ = "1.0.0"
