"""
Target scoring - locate a red target in video, grid it, and score impacts.
"""
__version__ = "0.1.0"
