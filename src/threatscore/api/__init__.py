"""
Threat Scoring API Package

This package contains the REST API components for the threat scoring engine.
"""

from .server import create_app

__all__ = ['create_app']
