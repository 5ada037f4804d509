"""
Text normalization applied to records before validation.
"""

from .normalizer import STYLES, Normalizer, canonical_text

__all__ = ["Normalizer", "canonical_text", "STYLES"]
