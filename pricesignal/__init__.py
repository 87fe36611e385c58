"""
PriceSignal

Exact-decimal technical indicators and multi-indicator trade signals.
"""

__version__ = "0.1.0"
