"""
Convenience entry point for running slotcatalog directly.

Usage: python -m slotcatalog [command] [options]
"""

from .cli.app import app

if __name__ == "__main__":
    app()
