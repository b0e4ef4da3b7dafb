from __future__ import annotations

import logging

from can_browser.core.indexer import CatalogIndex
from can_browser.validation.errors import ValidationError, summarise_issues


def validate_index(index: CatalogIndex) -> None:
    """Raise ValidationError if parsing or indexing recorded any data-quality issue."""
    if index.issues:
        raise ValidationError(list(index.issues))


def warn_on_invalid_index(index: CatalogIndex, location: str, logger: logging.Logger) -> None:
    """
    Validate a freshly built index and log a warning if it is not clean.

    Warn-only: the catalog stays browsable with defaults in place of the bad fields.
    """
    try:
        validate_index(index)
    except ValidationError as e:
        logger.warning(
            "Dataset %r has %d data-quality issue(s): %s",
            location,
            len(e.issues),
            summarise_issues(e.issues),
        )
