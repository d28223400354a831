"""
meetcal - compute when the parties of a meeting can meet.
"""

__version__ = "0.1.0"
