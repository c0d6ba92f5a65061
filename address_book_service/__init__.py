"""Address book web application with routing demos."""

__version__ = "0.1.0"
