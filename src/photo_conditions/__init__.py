"""Photography condition scoring and multi-location comparison."""

__version__ = "0.1.0"
