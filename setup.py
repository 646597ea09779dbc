"""
Setup script for neon-drift.

Neon Drift is a terminal vocabulary runner. It drills a plain-text word
list with adaptive question selection:

1. Word lists - One word per line, optional "word - hint" pairs
2. Mastery tracking - Weak and recently missed words come back more often
3. Arcade sessions - Score, streak, combo, and energy on a timed run

The 'drift' command is the entry point.
"""

from setuptools import find_namespace_packages, setup

setup(
    name="neon-drift",
    version="1.0.0",
    description="Adaptive vocabulary drilling engine with a Rich terminal front-end",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    packages=find_namespace_packages(include=["src", "src.*"]),
    py_modules=["config"],
    python_requires=">=3.10",
    install_requires=[
        # CLI
        "typer>=0.9.0",
        "rich>=13.0.0",
        # Config & Validation
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
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
            "drift=src.drift.drift_cli:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Education",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Education",
        "Topic :: Education :: Computer Aided Instruction (CAI)",
    ],
    keywords="vocabulary learning adaptive-practice cli education",
)
