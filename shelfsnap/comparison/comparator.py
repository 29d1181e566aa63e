"""
Planogram vs. Detection Comparison

This module implements the comparison that checks a detection snapshot
against the expected planogram layout.

Comparison Strategy:
    1. Derive each item's normalized cell rectangle
    2. For each item (input order), the first detection whose bounding-box
       center lies inside the cell (edges inclusive) is its match
    3. Matched detections are recorded as consumed; a consumed detection
       is still eligible for later items whose cells overlap
    4. Every detection never consumed is reported as overstock

Discrepancy Types:
    - MISSING: No detection center falls inside the item's cell
    - MISPLACED: The matched detection's label fails the misplacement policy
    - OVERSTOCK: A detection matched no cell at all

Output Order:
    Item discrepancies in item order, then overstock in detection order.

Complexity:
    Time: O(n × m) for n items and m detections (m is vectorized per item)
    Space: O(n + m)
"""

import logging
from typing import Dict, List, Optional, Sequence, Set

from ..config import ComparatorConfig, INVALID_ITEM_POLICIES
from ..data_models import (
    Planogram, PlanogramItem, Detection,
    Discrepancy, DiscrepancyType, ComplianceReport, ComparisonScenario
)
from ..errors import InvalidItem
from ..geometry.cells import (
    cell_rect, validate_layout, detection_centers, first_point_in_cell
)
from ..timing import Timer
from .policies import MisplacementPolicy, LabelMismatchPolicy, get_policy

logger = logging.getLogger(__name__)


def compare(
    planogram: Planogram,
    items: Sequence[PlanogramItem],
    detections: Sequence[Detection],
    policy: Optional[MisplacementPolicy] = None,
    invalid_item_policy: str = "missing"
) -> List[Discrepancy]:
    """
    Compare a detection snapshot against a planogram.

    Args:
        planogram: Layout the items belong to
        items: Full item set of the planogram
        detections: One immutable detection snapshot
        policy: Misplacement policy (defaults to LabelMismatchPolicy)
        invalid_item_policy: "missing" reports an item on a non-existent
            shelf as MISSING and logs a warning; "reject" raises

    Returns:
        Ordered list of discrepancies

    Raises:
        InvalidLayout: if shelves_count <= 0 or shelf_width_mm <= 0
        InvalidItem: for an out-of-range shelf_index under "reject"
        ValueError: for an unknown invalid_item_policy
    """
    validate_layout(planogram)
    if invalid_item_policy not in INVALID_ITEM_POLICIES:
        raise ValueError(
            f"invalid_item_policy must be one of {INVALID_ITEM_POLICIES}, "
            f"got {invalid_item_policy!r}"
        )
    if policy is None:
        policy = LabelMismatchPolicy()

    centers = detection_centers(detections)
    discrepancies: List[Discrepancy] = []
    consumed: Set[str] = set()

    def emit(kind: DiscrepancyType, item_id: Optional[str] = None,
             detection_id: Optional[str] = None) -> None:
        discrepancies.append(Discrepancy(
            id=f"d-{len(discrepancies)}",
            type=kind,
            planogram_item_id=item_id,
            detection_id=detection_id
        ))

    for item in items:
        if not 0 <= item.shelf_index < planogram.shelves_count:
            if invalid_item_policy == "reject":
                raise InvalidItem(item.id, item.shelf_index, planogram.shelves_count)
            logger.warning(
                "Item %s on shelf %d outside planogram %s (%d shelves); reporting as missing",
                item.id, item.shelf_index, planogram.id, planogram.shelves_count
            )
            emit(DiscrepancyType.MISSING, item_id=item.id)
            continue

        cell = cell_rect(planogram, item)
        match_index = first_point_in_cell(centers, cell)

        if match_index < 0:
            emit(DiscrepancyType.MISSING, item_id=item.id)
            continue

        detection = detections[match_index]
        consumed.add(detection.id)
        if policy.is_misplaced(detection.label, item.product_id):
            emit(DiscrepancyType.MISPLACED, item_id=item.id, detection_id=detection.id)

    for detection in detections:
        if detection.id not in consumed:
            emit(DiscrepancyType.OVERSTOCK, detection_id=detection.id)

    logger.debug(
        "Compared planogram %s: %d items, %d detections, %d discrepancies",
        planogram.id, len(items), len(detections), len(discrepancies)
    )
    return discrepancies


def compute_compliance_score(
    items: Sequence[PlanogramItem],
    discrepancies: Sequence[Discrepancy]
) -> float:
    """
    Share of items with no discrepancy referencing them.

    A score of 1.0 means every item was found with an acceptable label.
    An empty planogram is fully compliant.
    """
    if not items:
        return 1.0
    flagged = {d.planogram_item_id for d in discrepancies if d.planogram_item_id is not None}
    ok = sum(1 for item in items if item.id not in flagged)
    return ok / len(items)


class PlanogramComparator:
    """
    Configured comparator producing full compliance reports.

    Attributes:
        config: Comparator settings
        policy: Misplacement policy resolved from config (or given)

    Example:
        >>> comparator = PlanogramComparator()
        >>> report = comparator.analyze(planogram, items, detections)
        >>> print(report.summary())
    """

    def __init__(
        self,
        config: Optional[ComparatorConfig] = None,
        policy: Optional[MisplacementPolicy] = None
    ):
        self.config = config or ComparatorConfig()
        self.policy = policy or get_policy(self.config.misplacement_policy)

    def compare(
        self,
        planogram: Planogram,
        items: Sequence[PlanogramItem],
        detections: Sequence[Detection]
    ) -> List[Discrepancy]:
        """Run the bare comparison with this comparator's settings."""
        return compare(
            planogram, items, detections,
            policy=self.policy,
            invalid_item_policy=self.config.invalid_item_policy
        )

    def analyze(
        self,
        planogram: Planogram,
        items: Sequence[PlanogramItem],
        detections: Sequence[Detection]
    ) -> ComplianceReport:
        """
        Compare and wrap the result in a ComplianceReport.

        Raises:
            InvalidLayout: see compare()
        """
        with Timer(f"compare {planogram.id}", logger) as timer:
            discrepancies = self.compare(planogram, items, detections)

        return ComplianceReport(
            discrepancies=discrepancies,
            total_expected=len(items),
            total_detected=len(detections),
            compliance_score=compute_compliance_score(items, discrepancies),
            processing_time_ms=timer.elapsed_ms
        )

    def analyze_scenario(self, scenario: ComparisonScenario) -> ComplianceReport:
        return self.analyze(scenario.planogram, scenario.items, scenario.detections)


def compare_planogram(
    scenario: ComparisonScenario,
    config: Optional[ComparatorConfig] = None
) -> ComplianceReport:
    """
    Convenience function for a one-off comparison.

    Creates a PlanogramComparator and analyzes the scenario.
    """
    return PlanogramComparator(config).analyze_scenario(scenario)


def generate_compliance_report(
    scenario: ComparisonScenario,
    verbose: bool = True,
    config: Optional[ComparatorConfig] = None,
    limit: int = 20
) -> str:
    """
    Generate a human-readable compliance report.

    Args:
        scenario: Scenario to analyze
        verbose: Include detailed discrepancy list
        config: Comparator settings
        limit: Maximum discrepancies listed in detail

    Returns:
        Formatted string report
    """
    report = compare_planogram(scenario, config)

    lines = [report.summary()]

    if verbose and report.discrepancies:
        lines.append("\nDETAILED DISCREPANCIES:")
        lines.append("-" * 40)

        for i, discrepancy in enumerate(report.discrepancies[:limit]):
            lines.append(f"{i+1}. {describe_discrepancy(discrepancy)}")

        if len(report.discrepancies) > limit:
            lines.append(f"... and {len(report.discrepancies) - limit} more discrepancies")

    return "\n".join(lines)


def describe_discrepancy(discrepancy: Discrepancy) -> str:
    """One-line description of a discrepancy."""
    tag = f"[{discrepancy.type.value.upper()}]"
    if discrepancy.type == DiscrepancyType.MISSING:
        return f"{tag} item {discrepancy.planogram_item_id} has no detection"
    if discrepancy.type == DiscrepancyType.OVERSTOCK:
        return f"{tag} detection {discrepancy.detection_id} outside every cell"
    return (
        f"{tag} item {discrepancy.planogram_item_id} holds detection "
        f"{discrepancy.detection_id} with another label"
    )


def validate_against_ground_truth(
    scenario: ComparisonScenario,
    config: Optional[ComparatorConfig] = None,
    report: Optional[ComplianceReport] = None
) -> Dict[str, float]:
    """
    Validate comparison results against ground truth labels.

    Only works for synthetic scenarios that have ground truth. Items and
    detections are keyed as ("item", id) / ("detection", id) so missing,
    misplaced and overstock cases are scored together.

    Pass an already computed report to skip re-running the comparison.

    Returns:
        Dictionary with precision, recall, and F1 score

    Raises:
        ValueError: if the scenario has no ground truth
    """
    if scenario.ground_truth is None:
        raise ValueError("Scenario has no ground truth labels")

    if report is None:
        report = compare_planogram(scenario, config)
    truth = scenario.ground_truth

    found = set()
    for d in report.discrepancies:
        if d.type == DiscrepancyType.OVERSTOCK:
            found.add(("detection", d.detection_id))
        else:
            found.add(("item", d.planogram_item_id))

    expected = {("item", i) for i in truth.missing_item_ids + truth.misplaced_item_ids}
    expected |= {("detection", i) for i in truth.overstock_detection_ids}

    true_positives = len(found & expected)
    false_positives = len(found - expected)
    false_negatives = len(expected - found)

    precision = true_positives / (true_positives + false_positives) if (true_positives + false_positives) > 0 else 0
    recall = true_positives / (true_positives + false_negatives) if (true_positives + false_negatives) > 0 else 0
    f1 = 2 * precision * recall / (precision + recall) if (precision + recall) > 0 else 0

    return {
        'precision': precision,
        'recall': recall,
        'f1_score': f1,
        'true_positives': true_positives,
        'false_positives': false_positives,
        'false_negatives': false_negatives
    }
