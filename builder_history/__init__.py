"""Revision history for documents edited with the visual page builder."""

__version__ = "0.1.0"
