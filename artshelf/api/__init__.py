# artshelf/api/__init__.py

"""
HTTP layer of the Art Shelf gallery.

Example:
    from artshelf.api import create_app

    app = create_app()
"""
from .app import create_app
from .endpoints import router

__all__ = ['create_app', 'router']
