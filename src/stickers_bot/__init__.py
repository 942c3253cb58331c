"""
Stickers Bot - Teams messaging extension backend
Serves keyword sticker search over a cached remote catalog
"""

__version__ = "1.0.0"
