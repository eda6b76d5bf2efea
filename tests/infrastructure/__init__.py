"""
Shared test infrastructure for strata.

Modules:
- file_utils: writing config documents into temp directories
"""

from .file_utils import write, write_doc

__all__ = ["write", "write_doc"]
