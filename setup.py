"""
Setup script for Trend Hub - multi-platform trending topics aggregation service.
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read the README file
readme_file = Path(__file__).parent / "README.md"
long_description = readme_file.read_text(encoding="utf-8") if readme_file.exists() else ""

setup(
    name="trend-hub",
    version="1.0.0",
    description="Aggregates, deduplicates and ranks trending topics across content platforms",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="Trend Hub Team",
    packages=find_packages(include=["trend_hub", "trend_hub.*", "api", "api.*"]),
    python_requires=">=3.11",
    install_requires=[
        # Cache / key-value store
        "redis>=5.0.1",

        # AI/LLM APIs
        "openai>=1.12.0",

        # HTTP client
        "aiohttp>=3.9.0",

        # Web API
        "fastapi>=0.109.0",
        "uvicorn>=0.27.0",

        # Data validation
        "pydantic>=2.5.0",

        # Monitoring and observability
        "prometheus-client>=0.19.0",

        # Utilities
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.4.0",
            "pytest-asyncio>=0.21.0",
            "pytest-cov>=4.1.0",
            "httpx>=0.26.0",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Internet :: WWW/HTTP :: Dynamic Content",
    ],
    include_package_data=True,
    zip_safe=False,
)
