"""
Database Initialization and Management
=====================================

MongoDB client lifecycle for the flow service.
"""

from .mongodb import MongoDBConnectionManager

__all__ = ["MongoDBConnectionManager"]
