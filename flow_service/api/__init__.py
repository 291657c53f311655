"""
Flow Service API Package
HTTP routers for the flow builder backend.
"""
