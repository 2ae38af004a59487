"""
HTTP API for the URL load tester.
"""

from .handler import Handler
from .router import create_app

__all__ = ['Handler', 'create_app']
