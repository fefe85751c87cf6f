"""
overlaykit - resource overlay builder

overlaykit compiles declarative overlay descriptions into signed, installable
overlay packages and selects the platform backend used to manage them.
"""

__version__ = "1.0.0"
__all__ = ["__version__"]
