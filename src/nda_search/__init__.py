"""Exact and fuzzy data element search for the NDA data dictionary."""

__version__ = "0.3.0"
