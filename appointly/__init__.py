"""Appointly - weekly availability scheduling, public booking and ratings"""

__version__ = "1.0.0"
