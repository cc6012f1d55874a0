"""
Format Kernel - shared core for file-format record readers.

Provides:
- Typed exception hierarchy with machine-readable codes
- Structured JSON logging with split-scoped context
- Immutable record schemas and the structured-record builder
"""

__version__ = "0.1.0"
