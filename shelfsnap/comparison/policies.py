"""
Misplacement Policies

A policy decides whether a detection matched to a planogram cell carries
the wrong product. The detector only reports coarse category labels, so
every policy here is a best-effort signal rather than a product identity
check.
"""

from abc import ABC, abstractmethod
from typing import Dict, Optional, Type


class MisplacementPolicy(ABC):
    """Decides whether a matched detection holds the wrong product."""

    name: str = "abstract"

    @abstractmethod
    def is_misplaced(self, detection_label: Optional[str], expected_product_id: str) -> bool:
        """
        Args:
            detection_label: Label reported by the detector, possibly None
            expected_product_id: Product the planogram item expects

        Returns:
            True if a MISPLACED discrepancy should be reported
        """


class LabelMismatchPolicy(MisplacementPolicy):
    """
    Misplaced when the detector reports a non-empty label that differs
    from the product id string. Unlabelled detections always pass.
    """

    name = "label"

    def is_misplaced(self, detection_label: Optional[str], expected_product_id: str) -> bool:
        if not detection_label:
            return False
        return detection_label != str(expected_product_id)


class CaseInsensitiveLabelPolicy(MisplacementPolicy):
    """Like LabelMismatchPolicy, ignoring case and surrounding whitespace."""

    name = "label-ci"

    def is_misplaced(self, detection_label: Optional[str], expected_product_id: str) -> bool:
        if detection_label is None:
            return False
        label = detection_label.strip().casefold()
        if not label:
            return False
        return label != str(expected_product_id).strip().casefold()


class IgnoreLabelsPolicy(MisplacementPolicy):
    """Presence-only audit: a matched cell is never misplaced."""

    name = "ignore"

    def is_misplaced(self, detection_label: Optional[str], expected_product_id: str) -> bool:
        return False


POLICIES: Dict[str, Type[MisplacementPolicy]] = {
    LabelMismatchPolicy.name: LabelMismatchPolicy,
    CaseInsensitiveLabelPolicy.name: CaseInsensitiveLabelPolicy,
    IgnoreLabelsPolicy.name: IgnoreLabelsPolicy,
}


def get_policy(name: str) -> MisplacementPolicy:
    """
    Instantiate a registered policy by name.

    Raises:
        ValueError: if no policy is registered under ``name``
    """
    try:
        return POLICIES[name]()
    except KeyError:
        raise ValueError(
            f"Unknown misplacement policy {name!r}; "
            f"expected one of {sorted(POLICIES)}"
        ) from None
