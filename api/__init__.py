"""
HTTP API for the trend aggregation service.
"""

__version__ = "1.0.0"
