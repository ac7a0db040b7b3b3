"""
TERRAIN opportunity screener.

Scores, filters and ranks biomedical indications from a precomputed
market-intelligence catalog.
"""

__version__ = "0.1.0"
