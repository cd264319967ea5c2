# routes/__init__.py
"""
Routes package initialization
All route blueprints are imported and registered in app.py
"""

from .mrp_logs import mrp_logs_bp

__all__ = [
    'mrp_logs_bp'
]
