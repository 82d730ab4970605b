"""
API routers for the trend aggregation service.
"""

__all__ = ["health", "trends", "search", "summary", "settings", "metrics"]
