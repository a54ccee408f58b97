"""
semicolon-cli: plans explicit statement terminators for JavaScript modules.
"""

from .core import ProcessingContext, SemicolonProcessor, process

__version__ = "0.1.0"

__all__ = ["ProcessingContext", "SemicolonProcessor", "process", "__version__"]
