"""
BACKEND PACKAGE

Flask API, notification scheduler and CLI built on the OTP core.
"""

from .app import create_app

__all__ = ['create_app']
