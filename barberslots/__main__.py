"""
Convenience entry point for running barberslots directly.

Usage: python -m barberslots [command] [options]
"""

from .cli.app import app

if __name__ == "__main__":
    app()
