"""Agent Standards: profile inheritance resolver for markdown standards."""

__version__ = "0.1.0"
