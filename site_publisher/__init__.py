"""
site-publisher: rebuild a static site's generated data and push it.
"""

__version__ = "0.1.0"
