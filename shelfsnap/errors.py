"""
Error types raised by the comparator and its helpers.

All errors derive from ``ValueError`` since they describe malformed input
rather than runtime failures.
"""

from typing import Optional


class ComparisonError(ValueError):
    """Base class for rejected comparison input."""


class InvalidLayout(ComparisonError):
    """Planogram has no shelves or zero width, so cells cannot be derived."""

    def __init__(self, planogram_id: str, shelves_count: int, shelf_width_mm: int):
        self.planogram_id = planogram_id
        self.shelves_count = shelves_count
        self.shelf_width_mm = shelf_width_mm
        super().__init__(
            f"Planogram {planogram_id} has invalid layout: "
            f"shelves_count={shelves_count}, shelf_width_mm={shelf_width_mm}"
        )


class InvalidItem(ComparisonError):
    """Planogram item references a shelf row the planogram does not have."""

    def __init__(self, item_id: str, shelf_index: int, shelves_count: int,
                 message: Optional[str] = None):
        self.item_id = item_id
        self.shelf_index = shelf_index
        self.shelves_count = shelves_count
        super().__init__(
            message or
            f"Item {item_id} has shelf_index={shelf_index} outside "
            f"[0, {shelves_count})"
        )
