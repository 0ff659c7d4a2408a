"""
Name-fix pipeline.

Ordered, single-pass correction of a person's names across scripts and
locales, with every change recorded for review.
"""

from .context import (
    Locale, NameField, NameChange, NameFixContext,
    SURNAME_FIELDS, PERSONAL_FIELDS,
)
from .base import NameFixHandler
from .pipeline import NameFixPipeline, create_default_pipeline

__all__ = [
    'Locale', 'NameField', 'NameChange', 'NameFixContext',
    'SURNAME_FIELDS', 'PERSONAL_FIELDS',
    'NameFixHandler', 'NameFixPipeline', 'create_default_pipeline',
]
