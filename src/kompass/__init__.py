"""kompass: component catalog aggregator."""

__version__ = "0.3.0"
