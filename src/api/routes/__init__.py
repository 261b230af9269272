"""
API Routes
==========

Route modules for the product entry service.
"""

from src.api.routes.extract import router as extract_router

__all__ = ["extract_router"]
