"""
API Package
===========

FastAPI application and routes.
"""
