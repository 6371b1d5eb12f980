"""
Bulk appointment scheduling: recurring slot generation and conflict preview.
"""

__version__ = "0.1.0"
