"""
Setup script for Station Search
"""

from setuptools import setup, find_namespace_packages
from pathlib import Path

# Read README for long description
readme_file = Path(__file__).parent / "README.md"
long_description = readme_file.read_text() if readme_file.exists() else ""

setup(
    name="station-search",
    version="0.1.0",
    author="Michelle Liu",
    description="Multi-strategy search engine for facility records: exact, substring, fuzzy and phonetic matching",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/michellviu/Distributed-Search-Engine",
    # Subpackages have no __init__.py
    packages=find_namespace_packages(include=["station_search", "station_search.*"]),
    entry_points={
        "console_scripts": [
            "station-search=station_search.cli:main",
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Topic :: Text Processing :: Indexing",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],
    python_requires=">=3.8",
    install_requires=[
        "pydantic>=2.0.0",
        "click>=8.0.0",
        "rapidfuzz>=3.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
        ],
        "test": [
            "pytest>=7.0.0",
        ],
    },
)
