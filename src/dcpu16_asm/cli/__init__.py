"""
DCPU-16 Assembler Command-Line Interface
========================================

This package provides the ``dasm`` command-line assembler, a Click-based
application with help text and consistent error reporting.
"""

__all__ = ["dasm"]
