"""
Resource API
============

MongoDB-backed CRUD service for the device platform.
"""

__version__ = "1.0.0"
