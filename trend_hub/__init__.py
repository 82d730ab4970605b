"""
Trend Hub - multi-platform trending topics aggregation.
"""

__version__ = "1.0.0"
