"""
Entry point for running Neon Drift as a module.

Usage:
    python -m src.drift play words.txt
    python -m src.drift stats
    python -m src.drift --help
"""
from .drift_cli import main

if __name__ == "__main__":
    main()
