"""Ordered execution of name-fix handlers."""

import logging
from typing import Iterable, Iterator, List, Tuple

from .base import NameFixHandler
from .context import NameFixContext
from .handlers import default_handlers

logger = logging.getLogger(__name__)


class NameFixPipeline:
    """Runs enabled handlers once each, in ascending order, over a context.

    The run is a single forward pass. A handler that raises is logged with
    its traceback and the run continues with the next handler.
    """

    def __init__(self, handlers: Iterable[NameFixHandler]):
        # sorted() is stable, so handlers sharing an order keep their given order
        self._handlers: List[NameFixHandler] = sorted(
            (h for h in handlers if h.enabled), key=lambda h: h.order
        )
        logger.debug(
            f"NameFixPipeline initialized with {len(self._handlers)} handlers: "
            + ", ".join(f"{h.name}({h.order})" for h in self._handlers)
        )

    @property
    def handlers(self) -> Tuple[NameFixHandler, ...]:
        return tuple(self._handlers)

    def process(self, context: NameFixContext) -> NameFixContext:
        """Run every handler over the context.

        Returns:
            The same context, with its names updated and changes appended
        """
        logger.debug(f"Processing {context}")
        initial = len(context.changes)

        for handler in self._handlers:
            before = len(context.changes)
            try:
                handler.handle(context)
            except Exception:
                logger.exception(f"Handler {handler.name} failed for {context.person_id}")
                continue

            made = len(context.changes) - before
            if made:
                logger.debug(f"Handler {handler.name} made {made} change(s)")

        total = len(context.changes) - initial
        if total:
            logger.info(f"{context.person_id}: {total} total change(s)")
        return context

    def process_many(self, contexts: Iterable[NameFixContext]) -> Iterator[NameFixContext]:
        """Process contexts lazily, yielding each one when done."""
        for context in contexts:
            yield self.process(context)


def create_default_pipeline(variants=None, surname_normalizer=None) -> NameFixPipeline:
    """Build the standard pipeline with every handler.

    Args:
        variants: NameVariantsDictionary for typo suggestions; without it the
            typo handler does nothing
        surname_normalizer: SurnameNormalizer for married-surname matching;
            the shared instance is used when omitted

    Returns:
        Configured NameFixPipeline
    """
    return NameFixPipeline(default_handlers(variants=variants, surname_normalizer=surname_normalizer))
