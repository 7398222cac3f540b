"""
CLI package for nasfan

This package provides the command-line interface for
running the fan control loop once or as a service.
"""

from .interface import main

__all__ = ['main']
