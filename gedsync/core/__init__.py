"""Core person data model."""

from .person import PersonRecord, DateInfo, DatePrecision, DateModifier, Gender

__all__ = ['PersonRecord', 'DateInfo', 'DatePrecision', 'DateModifier', 'Gender']
