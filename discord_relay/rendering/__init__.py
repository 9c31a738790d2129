"""
Message Rendering Module

- resolve_mentions: Mention token substitution
- ContentRenderer: Event to payload rendering with reference quoting
- AnnotationAugmenter: Rule-based breakdown and AI summary sections
"""

from .entity_resolver import resolve_mentions
from .content_renderer import ContentRenderer
from .annotation_augmenter import AnnotationAugmenter, build_breakdown

__all__ = ['resolve_mentions', 'ContentRenderer', 'AnnotationAugmenter', 'build_breakdown']
