"""
Terminal adapters for Grid Shooter: rendering and keyboard input.
"""
