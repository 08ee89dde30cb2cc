"""PinMeta module namespace.

This package groups the reusable pipeline components:
- product loading and config
- banned-word content validation
- SEO metadata generation
- pin feed CSV persistence
- shared utilities
"""
