"""
Raft v0.1 - a small dynamically-typed scripting language.
"""

__version__ = "0.1.0"
