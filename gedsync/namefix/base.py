"""Base class for name-fix handlers."""

from typing import Optional

from .context import NameFixContext, Locale, NameField


class NameFixHandler:
    """One single-responsibility step of the name-fix pipeline.

    Subclasses set `name` and `order` and implement `handle()`. Handlers
    run once each, in ascending `order`, and must treat missing data as
    nothing to do rather than an error.

    Order ranges:
    - 1-9: character cleanup
    - 10-29: script splitting, relocation and extraction
    - 30-39: language detection
    - 40-49: transliteration
    - 50-69: surname fixes
    - 90-99: formatting, de-duplication, cleanup and suggestions
    """

    name: str = "Handler"
    order: int = 50
    enabled: bool = True

    def handle(self, context: NameFixContext):
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r}, order={self.order})"

    # Helpers recording changes under this handler's name

    def set_name(self, context: NameFixContext, locale: Locale, name_field: NameField,
                 value: Optional[str], reason: str) -> bool:
        return context.set_name(locale, name_field, value, reason, self.name)

    def move_name(self, context: NameFixContext, from_locale: Locale, to_locale: Locale,
                  name_field: NameField, reason: str) -> bool:
        return context.move_name(from_locale, to_locale, name_field, reason, self.name)

    def remove_name(self, context: NameFixContext, locale: Locale, name_field: NameField,
                    reason: str) -> bool:
        return context.remove_name(locale, name_field, reason, self.name)

    def set_primary(self, context: NameFixContext, name_field: NameField,
                    value: Optional[str], reason: str) -> bool:
        return context.set_primary(name_field, value, reason, self.name)

    def set_value(self, context: NameFixContext, locale: Optional[Locale], name_field: NameField,
                  value: Optional[str], reason: str) -> bool:
        return context.set_value(locale, name_field, value, reason, self.name)
