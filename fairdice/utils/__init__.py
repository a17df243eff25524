"""
fairdice.utils
--------------

Light helpers shared by the commit→reveal core: hex/bytes conversion with
strict validation, and the key/MAC primitives used for commitments.

This package file deliberately avoids eager imports.
"""

__all__: list[str] = []
