"""
Companion name slot reconciliation.

Each category keeps one name slot per seat. When a category's count
changes the slot list is resized: growing restores names that used to
sit at the same index, shrinking drops the tail but remembers it. The
primary guest always occupies slot 0 of the main category and never
appears anywhere else.
"""

import logging
from typing import Dict, List, Mapping, Optional, Sequence

from seatplan.domain import (
    CATEGORIES,
    main_category,
    normalize_counts,
    normalize_names,
    same_name,
)

logger = logging.getLogger(__name__)


def _settle_primary(names: List[str], main_name: str, is_main_category: bool) -> List[str]:
    start = 0
    if is_main_category and names:
        names[0] = main_name
        start = 1
    for index in range(start, len(names)):
        if same_name(names[index], main_name):
            logger.debug(f"Blanked duplicate of primary guest '{main_name}' at slot {index}")
            names[index] = ""
    return names


def reconcile(
    category: str,
    new_count: int,
    previous_names: Optional[Sequence[str]],
    main_name: str,
    is_main_category: bool,
    current_names: Optional[Sequence[str]] = None,
) -> List[str]:
    """Resize one category's name slots to ``new_count``.

    ``previous_names`` is the longest known name list for the category and
    is the source for restoring slots on growth; ``current_names`` is the
    list being resized and defaults to ``previous_names``.
    """
    new_count = max(0, int(new_count))
    previous = [name or "" for name in (previous_names or [])]
    current = previous if current_names is None else [name or "" for name in current_names]

    if new_count <= len(current):
        names = list(current[:new_count])
    else:
        names = list(current)
        for index in range(len(current), new_count):
            if is_main_category and index == 0:
                names.append(main_name)
                continue
            restored = previous[index] if index < len(previous) else ""
            if same_name(restored, main_name):
                restored = ""
            names.append(restored)

    logger.debug(f"Reconciled {category}: {len(current)} -> {new_count} slots")
    return _settle_primary(names, main_name, is_main_category)


class CompanionSlotReconciler:
    """Editing session over one party's companion names.

    Keeps a per-category cache of every name typed so far, so that a
    grow -> shrink -> grow cycle gives back the same names.
    """

    def __init__(
        self,
        main_name: str,
        companion_names: Optional[Mapping[str, Sequence[str]]] = None,
        counts: Optional[Mapping[str, int]] = None,
    ):
        self.main_name = main_name
        self._current = normalize_names(companion_names)
        self._originals = {category: list(names) for category, names in self._current.items()}
        counts = normalize_counts(counts) if counts is not None else None
        self._main = main_category(counts) if counts is not None else None
        if self._main is not None:
            self._place_primary(self._main, counts[self._main])

    @property
    def main(self) -> Optional[str]:
        return self._main

    @property
    def names(self) -> Dict[str, List[str]]:
        return {category: list(names) for category, names in self._current.items()}

    def _remember(self, category: str) -> None:
        current = self._current[category]
        self._originals[category] = list(current) + self._originals[category][len(current):]

    def _place_primary(self, main: str, count: int) -> None:
        current = self._current[main]
        if current and same_name(current[0], self.main_name):
            return
        if len(current) < count:
            # Older records list only companions in the main category
            self._move_primary(None, main)
        elif current:
            # Slot 0 is the primary's whatever was supplied there
            current[0] = self.main_name
            if self._originals[main]:
                self._originals[main][0] = self.main_name

    def _move_primary(self, old_main: Optional[str], new_main: Optional[str]) -> None:
        # The primary's slot leaves the old main category and the remaining
        # names shift left; the new main category gains slot 0 and its
        # companions shift right.
        if old_main is not None:
            current = self._current[old_main]
            if current and same_name(current[0], self.main_name):
                self._current[old_main] = current[1:]
                self._originals[old_main] = self._originals[old_main][1:]
        if new_main is not None:
            current = self._current[new_main]
            if not (current and same_name(current[0], self.main_name)):
                self._current[new_main] = [self.main_name] + current
                self._originals[new_main] = [self.main_name] + self._originals[new_main]
        logger.debug(f"Main category of '{self.main_name}' moved from {old_main} to {new_main}")

    def resize(self, category: str, new_count: int) -> List[str]:
        names = reconcile(
            category,
            new_count,
            self._originals[category],
            self.main_name,
            category == self._main,
            current_names=self._current[category],
        )
        self._current[category] = names
        self._remember(category)
        return list(names)

    def apply_counts(self, counts: Mapping[str, int]) -> Dict[str, List[str]]:
        """Resize every category to ``counts``, moving the primary slot if needed."""
        counts = normalize_counts(counts)
        new_main = main_category(counts)
        if new_main != self._main:
            self._move_primary(self._main, new_main)
            self._main = new_main
        for category in CATEGORIES:
            self.resize(category, counts[category])
        return self.names

    def rename(self, new_name: str) -> None:
        """Change the primary guest's name, keeping the forced slot in sync."""
        self.main_name = new_name
        for category in CATEGORIES:
            is_main = category == self._main
            self._current[category] = _settle_primary(self._current[category], new_name, is_main)
            self._originals[category] = _settle_primary(self._originals[category], new_name, is_main)
