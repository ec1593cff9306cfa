"""
Grid Shooter - a terminal arcade game on a threaded tick engine.
"""

__version__ = "0.1.0"
