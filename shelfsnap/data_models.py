"""
Data Models for the ShelfSnap Planogram Comparator

This module defines the core data structures used throughout the system.
Uses Python dataclasses for clean, type-hinted data containers.

Data Flow:
    Planogram + PlanogramItem[] →                      → ComparisonScenario
    Detection[]                 → compare() → Discrepancy[] → ComplianceReport
"""

from dataclasses import dataclass, field
from typing import List, Dict, Optional, Any, Tuple
from enum import Enum
import json


def _millimetres(value: Any) -> float:
    """Parse a length, keeping fractions and returning whole values as int."""
    number = float(value)
    return int(number) if number.is_integer() else number


class DiscrepancyType(Enum):
    """Kinds of mismatch between a planogram and a detection snapshot."""
    MISSING = "missing"           # Expected item has no detection in its cell
    OVERSTOCK = "overstock"       # Detection lies outside every defined cell
    MISPLACED = "misplaced"       # Detection in the cell carries another label


@dataclass
class Planogram:
    """
    A named shelving layout.

    Attributes:
        id: Opaque unique identifier
        shelves_count: Number of horizontal rows (>= 1)
        shelf_width_mm: Physical width of one shelf row (> 0)
        name: Display name
        section: Store section (e.g. "Dairy")
        store_id: Owning store reference
        shelf_height_mm: Physical height of one shelf row
        image_url: Reference picture of the layout
        created_at: Creation timestamp (ISO 8601 string)

    Only ``shelves_count`` and ``shelf_width_mm`` are read by the comparator.
    """
    id: str
    shelves_count: int
    shelf_width_mm: int
    name: str = "Untitled"
    section: Optional[str] = None
    store_id: Optional[str] = None
    shelf_height_mm: Optional[int] = None
    image_url: Optional[str] = None
    created_at: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "name": self.name,
            "section": self.section,
            "store_id": self.store_id,
            "shelves_count": self.shelves_count,
            "shelf_width_mm": self.shelf_width_mm,
            "shelf_height_mm": self.shelf_height_mm,
            "image_url": self.image_url,
            "created_at": self.created_at
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Planogram":
        """Create from dictionary (JSON deserialization)."""
        return cls(
            id=str(data["id"]),
            shelves_count=int(data["shelves_count"]),
            shelf_width_mm=int(data["shelf_width_mm"]),
            name=data.get("name", "Untitled"),
            section=data.get("section"),
            store_id=data.get("store_id"),
            shelf_height_mm=data.get("shelf_height_mm"),
            image_url=data.get("image_url"),
            created_at=data.get("created_at")
        )


@dataclass
class PlanogramItem:
    """
    One expected product placement within a planogram.

    Attributes:
        id: Opaque unique identifier
        planogram_id: Owning planogram
        product_id: Identifier of the expected product
        shelf_index: Row index in [0, shelves_count)
        x_mm: Horizontal offset from the left edge of the shelf
        width_mm: Horizontal extent of the slot
        facings: Consecutive units presented in the slot (informational)
        notes: Free-form merchandiser notes
    """
    id: str
    planogram_id: str
    product_id: str
    shelf_index: int
    x_mm: float
    width_mm: float
    facings: int = 1
    notes: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "planogram_id": self.planogram_id,
            "product_id": self.product_id,
            "shelf_index": self.shelf_index,
            "x_mm": self.x_mm,
            "width_mm": self.width_mm,
            "facings": self.facings,
            "notes": self.notes
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PlanogramItem":
        """Create from dictionary (JSON deserialization)."""
        return cls(
            id=str(data["id"]),
            planogram_id=str(data["planogram_id"]),
            product_id=str(data["product_id"]),
            shelf_index=int(data["shelf_index"]),
            x_mm=_millimetres(data["x_mm"]),
            width_mm=_millimetres(data["width_mm"]),
            facings=int(data.get("facings", 1)),
            notes=data.get("notes")
        )


@dataclass
class Product:
    """Catalogue record a planogram item can point at."""
    id: str
    sku: str
    name: str
    width_mm: int
    upc: Optional[str] = None
    brand: Optional[str] = None
    category: Optional[str] = None
    height_mm: Optional[int] = None
    depth_mm: Optional[int] = None
    image_url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "sku": self.sku,
            "name": self.name,
            "width_mm": self.width_mm,
            "upc": self.upc,
            "brand": self.brand,
            "category": self.category,
            "height_mm": self.height_mm,
            "depth_mm": self.depth_mm,
            "image_url": self.image_url
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Product":
        """Create from dictionary (JSON deserialization)."""
        return cls(
            id=str(data["id"]),
            sku=str(data["sku"]),
            name=str(data["name"]),
            width_mm=int(data["width_mm"]),
            upc=data.get("upc"),
            brand=data.get("brand"),
            category=data.get("category"),
            height_mm=data.get("height_mm"),
            depth_mm=data.get("depth_mm"),
            image_url=data.get("image_url")
        )


@dataclass(frozen=True)
class BoundingBox:
    """
    Rectangle in normalized image coordinates.

    Each edge lies in [0, 1] with ``right > left`` and ``bottom > top``;
    y grows downward as in image space.
    """
    left: float
    top: float
    right: float
    bottom: float

    @classmethod
    def from_xywh(cls, x: float, y: float, width: float, height: float) -> "BoundingBox":
        """Build from an origin + size rectangle."""
        return cls(left=x, top=y, right=x + width, bottom=y + height)

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top

    @property
    def mid_x(self) -> float:
        return (self.left + self.right) / 2

    @property
    def mid_y(self) -> float:
        return (self.top + self.bottom) / 2

    @property
    def center(self) -> Tuple[float, float]:
        return (self.mid_x, self.mid_y)

    def translated(self, dx: float, dy: float) -> "BoundingBox":
        """Return a copy shifted by (dx, dy)."""
        return BoundingBox(
            left=self.left + dx,
            top=self.top + dy,
            right=self.right + dx,
            bottom=self.bottom + dy
        )

    def to_dict(self) -> Dict[str, float]:
        """Convert to dictionary for JSON serialization."""
        return {
            "left": self.left,
            "top": self.top,
            "right": self.right,
            "bottom": self.bottom
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BoundingBox":
        """Create from dictionary (JSON deserialization)."""
        return cls(
            left=float(data["left"]),
            top=float(data["top"]),
            right=float(data["right"]),
            bottom=float(data["bottom"])
        )


@dataclass(frozen=True)
class Detection:
    """
    One detector result for a single camera frame.

    Attributes:
        id: Identifier unique within one detection pass
        bounding_box: Normalized box of the detected object
        label: Coarse category from the detector, if any
        confidence: Classifier confidence for ``label`` (0-1)
    """
    id: str
    bounding_box: BoundingBox
    label: Optional[str] = None
    confidence: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "bounding_box": self.bounding_box.to_dict(),
            "label": self.label,
            "confidence": self.confidence
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Detection":
        """Create from dictionary (JSON deserialization)."""
        return cls(
            id=str(data["id"]),
            bounding_box=BoundingBox.from_dict(data["bounding_box"]),
            label=data.get("label"),
            confidence=data.get("confidence")
        )


@dataclass(frozen=True)
class Discrepancy:
    """
    A single mismatch found by the comparator.

    Attributes:
        id: Identifier unique within one comparison result
        type: Kind of discrepancy (from DiscrepancyType enum)
        planogram_item_id: Affected item (MISSING and MISPLACED only)
        detection_id: Offending detection (OVERSTOCK and MISPLACED only)
    """
    id: str
    type: DiscrepancyType
    planogram_item_id: Optional[str] = None
    detection_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "type": self.type.value,
            "planogram_item_id": self.planogram_item_id,
            "detection_id": self.detection_id
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Discrepancy":
        """Create from dictionary (JSON deserialization)."""
        return cls(
            id=str(data["id"]),
            type=DiscrepancyType(data["type"]),
            planogram_item_id=data.get("planogram_item_id"),
            detection_id=data.get("detection_id")
        )


@dataclass
class GroundTruth:
    """
    Ground truth labels for a synthetic scenario (for testing/validation).

    Attributes:
        missing_item_ids: Items whose detection was removed
        misplaced_item_ids: Items whose detection was relabelled
        overstock_detection_ids: Detections injected outside every cell
    """
    missing_item_ids: List[str] = field(default_factory=list)
    misplaced_item_ids: List[str] = field(default_factory=list)
    overstock_detection_ids: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "missing_item_ids": self.missing_item_ids,
            "misplaced_item_ids": self.misplaced_item_ids,
            "overstock_detection_ids": self.overstock_detection_ids
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GroundTruth":
        """Create from dictionary (JSON deserialization)."""
        return cls(
            missing_item_ids=list(data.get("missing_item_ids", [])),
            misplaced_item_ids=list(data.get("misplaced_item_ids", [])),
            overstock_detection_ids=list(data.get("overstock_detection_ids", []))
        )


@dataclass
class ComparisonScenario:
    """
    Complete scenario: planogram, its items, a detection snapshot and
    optional ground truth.

    This is the main data container passed through the CLI pipeline.
    """
    planogram: Planogram
    items: List[PlanogramItem]
    detections: List[Detection]
    ground_truth: Optional[GroundTruth] = None
    scenario_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "planogram": self.planogram.to_dict(),
            "items": [i.to_dict() for i in self.items],
            "detections": [d.to_dict() for d in self.detections],
            "ground_truth": self.ground_truth.to_dict() if self.ground_truth else None,
            "scenario_id": self.scenario_id
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ComparisonScenario":
        """Create from dictionary (JSON deserialization)."""
        ground_truth = None
        if data.get("ground_truth"):
            ground_truth = GroundTruth.from_dict(data["ground_truth"])
        return cls(
            planogram=Planogram.from_dict(data["planogram"]),
            items=[PlanogramItem.from_dict(i) for i in data.get("items", [])],
            detections=[Detection.from_dict(d) for d in data.get("detections", [])],
            ground_truth=ground_truth,
            scenario_id=data.get("scenario_id")
        )

    def save_to_json(self, filepath: str) -> None:
        """Save scenario to JSON file."""
        with open(filepath, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load_from_json(cls, filepath: str) -> "ComparisonScenario":
        """Load scenario from JSON file."""
        with open(filepath, 'r') as f:
            data = json.load(f)
        return cls.from_dict(data)


@dataclass
class ComplianceReport:
    """
    Result of one comparison run.

    Attributes:
        discrepancies: Ordered comparator output
        total_expected: Number of planogram items
        total_detected: Number of detections in the snapshot
        compliance_score: Share of items with no discrepancy (0-1)
        processing_time_ms: Time taken by the comparison
    """
    discrepancies: List[Discrepancy]
    total_expected: int
    total_detected: int
    compliance_score: float
    processing_time_ms: float = 0.0

    @property
    def num_discrepancies(self) -> int:
        """Total number of discrepancies found."""
        return len(self.discrepancies)

    def count(self, discrepancy_type: DiscrepancyType) -> int:
        return sum(1 for d in self.discrepancies if d.type == discrepancy_type)

    def get_discrepancies_by_type(self) -> Dict[DiscrepancyType, List[Discrepancy]]:
        """Group discrepancies by their type."""
        by_type: Dict[DiscrepancyType, List[Discrepancy]] = {}
        for discrepancy in self.discrepancies:
            by_type.setdefault(discrepancy.type, []).append(discrepancy)
        return by_type

    def summary(self) -> str:
        """Generate human-readable summary."""
        lines = [
            "=" * 60,
            "PLANOGRAM COMPLIANCE REPORT",
            "=" * 60,
            f"Expected Products:    {self.total_expected}",
            f"Detected Objects:     {self.total_detected}",
            f"Total Discrepancies:  {self.num_discrepancies}",
            f"Compliance Score:     {self.compliance_score:.2%}",
            f"Processing Time:      {self.processing_time_ms:.2f} ms",
            "-" * 60,
            "DISCREPANCIES BY TYPE:",
        ]

        for discrepancy_type in DiscrepancyType:
            lines.append(
                f"  {discrepancy_type.value.upper():12}: {self.count(discrepancy_type)}"
            )

        lines.append("=" * 60)
        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "discrepancies": [d.to_dict() for d in self.discrepancies],
            "total_expected": self.total_expected,
            "total_detected": self.total_detected,
            "compliance_score": self.compliance_score,
            "processing_time_ms": self.processing_time_ms,
            "num_discrepancies": self.num_discrepancies
        }
