# catalog_api/auth/__init__.py
"""
Authentication and authorization for the catalog API.

This package contains:
- identity.py: Authenticated principal (public account fields only)
- basic.py: HTTP Basic credential decoding and verification
- ownership.py: Owner-only checks for mutating resource operations
"""
from catalog_api.auth.identity import Identity

__all__ = ["Identity"]
