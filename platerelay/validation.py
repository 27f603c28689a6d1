"""Content gate — does the image plausibly show an equipment nameplate?

Runs before the language-model call so photos of scenery or people never
cost a formatting request.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

EQUIPMENT_EVIDENCE = frozenset({"label", "nameplate", "signage", "material property"})


def normalize_labels(labels: Iterable[object]) -> set[str]:
    """Lower-case and strip string labels; anything that is not a string is dropped."""
    return {label.strip().lower() for label in labels if isinstance(label, str)}


def is_valid_content(labels: object, vocabulary: Iterable[str] = EQUIPMENT_EVIDENCE) -> bool:
    """True iff any label is in the equipment-evidence vocabulary.

    Total: malformed input (None, a bare string, a number) is rejected rather
    than raising. One matching label is enough.
    """
    if isinstance(labels, (str, bytes)) or not isinstance(labels, (Sequence, set, frozenset)):
        return False
    return not normalize_labels(labels).isdisjoint(normalize_labels(vocabulary))
