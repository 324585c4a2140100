"""Title matching between uncategorized expenses and trip activities.

Expenses created from an activity reuse the activity title and append an
annotation saying how they were created: " (Planning)" when the activity
was costed while planning, " (Split)" when its cost was split between
travellers. The Spanish UI writes "(Planificación)" and "(Dividido)".

Matching is exact, not fuzzy: the annotation is removed and the remainder
must equal an activity title character for character.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence

from travelplan.schemas.reconciliation import DefectiveRecord, ReferenceRecord

PLANNING_MARKERS: tuple[str, ...] = ("(Planning)", "(Planificación)")
SPLIT_MARKERS: tuple[str, ...] = ("(Split)", "(Dividido)")


def _strip_marker(marker: str) -> Callable[[str], str]:
    annotation = f" {marker}"

    def strip(title: str) -> str:
        # First occurrence only.
        return title.replace(annotation, "", 1)

    return strip


# Ordering matters: the first marker present in the title is the only one
# tried, so every planning marker outranks every split marker.
SUFFIX_RULES: list[tuple[str, Callable[[str], str]]] = [
    (marker, _strip_marker(marker)) for marker in (*PLANNING_MARKERS, *SPLIT_MARKERS)
]


def strip_suffix(title: str) -> str | None:
    """Return the title without its annotation, or None if it carries none."""
    for marker, strip in SUFFIX_RULES:
        if marker in title:
            return strip(title)
    return None


def find_reference(title: str, references: Iterable[ReferenceRecord]) -> ReferenceRecord | None:
    """First reference whose title equals ``title`` exactly."""
    return next((ref for ref in references if ref.title == title), None)


def match(
    defective: DefectiveRecord, references: Sequence[ReferenceRecord]
) -> ReferenceRecord | None:
    """Infer the activity an expense was derived from.

    Args:
        defective: Uncategorized expense
        references: Activities of the same trip, in load order

    Returns:
        The first activity whose title equals the expense title with its
        annotation removed, or None when the title carries no annotation
        or nothing matches.
    """
    stripped = strip_suffix(defective.title)
    if stripped is None:
        return None
    return find_reference(stripped, references)
