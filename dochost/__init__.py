"""
DocHost - multi-tenant documentation hosting
"""

__version__ = "1.0.0"
