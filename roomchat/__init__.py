"""A TCP chat server and client with a lobby and named chat rooms."""

__version__ = "1.0.0"
__all__ = ["__version__"]