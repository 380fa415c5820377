"""Run kubectl commands without knowing which namespace a resource lives in."""

__version__ = "0.1.0"
