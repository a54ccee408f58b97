"""
Source parsing and patch application modules.
"""

from .tree_sitter_parser import SourceSyntaxError, TreeSitterParser
from .patch_applier import PatchApplier, apply_patches

__all__ = ["SourceSyntaxError", "TreeSitterParser", "PatchApplier", "apply_patches"]
