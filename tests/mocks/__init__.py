"""
Mock implementations for testing.
"""

from tests.mocks.storage import FailingCacheRepository, MockCacheRepository
from tests.mocks.upstream import FakeUpstreamClient

__all__ = [
    "FailingCacheRepository",
    "MockCacheRepository",
    "FakeUpstreamClient",
]
