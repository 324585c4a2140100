"""Activity category to expense catalog resolution.

Activities and expense categories are managed independently and use
different vocabularies, so resolution goes through two lookups:

    domain category ("flight") -> display name ("Flights") -> catalog id

Both display tables are closed. Supporting a new domain category means
adding it here and to the catalog, not adding a code path.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from travelplan.schemas.reconciliation import (
    CategoryCatalogEntry,
    MatchReason,
    RecordId,
    ReferenceRecord,
)

DISPLAY_NAMES: dict[str, dict[str, str]] = {
    "en": {
        "flight": "Flights",
        "accommodation": "Lodging",
        "transport": "Transport",
        "food": "Food",
        "activity": "Activities",
        "shopping": "Shopping",
        "other": "Other",
    },
    "es": {
        "flight": "Vuelos",
        "accommodation": "Alojamiento",
        "transport": "Transporte",
        "food": "Comida",
        "activity": "Actividades",
        "shopping": "Compras",
        "other": "Otros",
    },
}

DEFAULT_LOCALE = "en"


def get_display_names(locale: str = DEFAULT_LOCALE) -> dict[str, str]:
    """Display table for a locale.

    Raises:
        KeyError: If the locale has no table
    """
    return DISPLAY_NAMES[locale]


def build_catalog_map(entries: Iterable[CategoryCatalogEntry]) -> dict[str, RecordId]:
    """Name -> id. On duplicate names the last entry wins."""
    return {entry.name: entry.id for entry in entries}


def resolve_with_reason(
    reference: ReferenceRecord,
    catalog: Mapping[str, RecordId],
    display_names: Mapping[str, str] | None = None,
) -> tuple[RecordId | None, MatchReason]:
    """Resolve the catalog id for an activity and say why it failed if it did."""
    if not reference.domain_category:
        return None, MatchReason.REFERENCE_HAS_NO_CATEGORY

    names = display_names if display_names is not None else DISPLAY_NAMES[DEFAULT_LOCALE]
    display_name = names.get(reference.domain_category)
    if display_name is None:
        return None, MatchReason.CATEGORY_NOT_IN_CATALOG

    category_id = catalog.get(display_name)
    if category_id is None:
        return None, MatchReason.CATEGORY_NOT_IN_CATALOG

    return category_id, MatchReason.MATCHED


def resolve(
    reference: ReferenceRecord,
    catalog: Mapping[str, RecordId],
    display_names: Mapping[str, str] | None = None,
) -> RecordId | None:
    """Catalog id for an activity's category, or None when it can't be resolved."""
    category_id, _ = resolve_with_reason(reference, catalog, display_names)
    return category_id
