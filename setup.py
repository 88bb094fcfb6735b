"""
Setup script for kidlearn-adaptive.

kidlearn-adaptive is the adaptive difficulty engine of the kidlearn
learning application for neurodivergent children. It serves three roles:

1. Library - difficulty rule, heuristic recommendations, activity ranking
2. Provider - remote recommendations with a local heuristic fallback
3. Service - REST endpoint with an optional ML connector

The 'kidlearn' command is the CLI entry point.
"""

from setuptools import find_packages, setup

setup(
    name="kidlearn-adaptive",
    version="1.0.0",
    description="Adaptive difficulty engine for neurodivergent learners",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    author="kidlearn",
    packages=find_packages(include=["kidlearn", "kidlearn.*"]),
    py_modules=["config"],
    python_requires=">=3.10",
    install_requires=[
        # CLI
        "typer>=0.9.0",
        "rich>=13.0.0",
        # Config & Validation
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        # HTTP
        "httpx>=0.25.0",
        # API
        "fastapi>=0.100.0",
        "uvicorn>=0.23.0",
        # Logging
        "loguru>=0.7.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
            "pytest-cov>=4.0.0",
            "ruff>=0.1.0",
            "mypy>=1.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "kidlearn=kidlearn.cli.main:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Developers",
        "Intended Audience :: Education",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Education",
        "Topic :: Education :: Computer Aided Instruction (CAI)",
    ],
    keywords="learning adaptive difficulty education neurodiversity",
)
