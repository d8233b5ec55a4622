"""
pagasm Command-Line Interface
=============================

- **pagasm**: the assembler

Implemented as a Click application with help and error reporting.
"""

__all__ = ["pagasm"]
