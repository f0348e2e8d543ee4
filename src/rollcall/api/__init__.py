"""
Rollcall API

HTTP interface for name parsing and identity resolution.
"""

from rollcall.api.app import create_app

__all__ = ["create_app"]
