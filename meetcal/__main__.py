"""
Convenience entry point for running meetcal as a module.

Usage: python -m meetcal [command] [options]
"""

from .cli.app import app

if __name__ == "__main__":
    app()
