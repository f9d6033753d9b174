"""
Runtime components of the watch loop.
"""
