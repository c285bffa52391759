"""
Bookwhen Watch

Watches a Bookwhen class calendar and notifies when a new class appears
or a full class reopens.
"""

__version__ = "1.0.0"
