"""
Typed client for the kintone app-schema API
"""

__version__ = "0.1.0"
