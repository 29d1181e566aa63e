"""
Synthetic Data Generator for Planogram Comparison

This module generates planograms and detection snapshots programmatically,
for demos, tests and the command-line tool. There is no external dataset.

Key Features:
- Grid planograms built through PlanogramGrid (rows × columns, optional gaps)
- Multiple product distribution patterns (unique, blocks, rows, random)
- Detection boxes jittered inside their cell (Gaussian noise)
- Explicit injection of missing, misplaced and overstock cases
- Reproducible results via random seed control
- JSON export for persistence

Example Usage:
    >>> from shelfsnap.synthetic_data import generate_scenario
    >>> scenario = generate_scenario(num_rows=3, num_cols=6, seed=42)
    >>> scenario.save_to_json("data/scenario.json")
"""

from pathlib import Path
from typing import List, Optional, Tuple
from enum import Enum
import numpy as np

from .builder import PlanogramGrid, DEFAULT_COLUMN_WIDTH_MM
from .data_models import (
    Planogram, PlanogramItem, Detection, BoundingBox,
    GroundTruth, ComparisonScenario
)
from .geometry.cells import cell_rect

# Share of the cell a generated detection box spans
BOX_FILL = 0.8
# Centers are kept this far (as a share of the cell) from cell edges so
# jitter never lands a detection on a neighbouring cell's edge
CENTER_MARGIN = 0.1


class SKUPattern(Enum):
    """Patterns for distributing products across grid cells."""
    UNIQUE = "unique"       # Each cell has its own product
    BLOCKS = "blocks"       # Same product in horizontal blocks
    ROWS = "rows"           # Same product per row
    RANDOM = "random"       # Random product from a pool


def _product_for_cell(
    row: int,
    col: int,
    counter: int,
    pattern: SKUPattern,
    rng: np.random.RandomState,
    sku_pool_size: int,
    block_width: int
) -> str:
    if pattern == SKUPattern.BLOCKS:
        return f"SKU_BLK{row:02d}_{col // block_width:02d}"
    if pattern == SKUPattern.ROWS:
        return f"SKU_ROW{row:02d}"
    if pattern == SKUPattern.RANDOM:
        return f"SKU_{rng.randint(1, sku_pool_size + 1):04d}"
    return f"SKU_{counter:04d}"


def generate_planogram(
    num_rows: int = 3,
    num_cols: int = 4,
    column_width_mm: int = DEFAULT_COLUMN_WIDTH_MM,
    fill_rate: float = 1.0,
    sku_pattern: SKUPattern = SKUPattern.UNIQUE,
    sku_pool_size: int = 20,
    block_width: int = 2,
    seed: Optional[int] = None,
    planogram_id: Optional[str] = None
) -> Tuple[Planogram, List[PlanogramItem]]:
    """
    Generate a synthetic grid planogram.

    Args:
        num_rows: Number of shelves (1-6)
        num_cols: Number of columns per shelf (1-8)
        column_width_mm: Physical width of one column
        fill_rate: Probability that a cell gets a product
        sku_pattern: How products are distributed across cells
        sku_pool_size: Number of products for RANDOM pattern
        block_width: Width of blocks for BLOCKS pattern
        seed: Random seed for reproducibility
        planogram_id: Identifier (defaults to "planogram_<rows>x<cols>")

    Returns:
        Tuple[Planogram, List[PlanogramItem]]: Layout and items, row-major

    Complexity:
        Time: O(num_rows × num_cols)
        Space: O(num_rows × num_cols)
    """
    rng = np.random.RandomState(seed)
    grid = PlanogramGrid(rows=num_rows, cols=num_cols, column_width_mm=column_width_mm)

    counter = 1
    for row in range(num_rows):
        for col in range(num_cols):
            if fill_rate < 1.0 and rng.random_sample() >= fill_rate:
                continue
            grid.assign(row, col, _product_for_cell(
                row, col, counter, sku_pattern, rng, sku_pool_size, block_width
            ))
            counter += 1

    planogram_id = planogram_id or f"planogram_{num_rows}x{num_cols}"
    ids = iter([planogram_id] + [f"item_{i:04d}" for i in range(num_rows * num_cols)])
    planogram, items = grid.build(name=f"Synthetic {num_rows}x{num_cols}",
                                  id_factory=lambda: next(ids))
    return planogram, items


def _box_in_cell(
    planogram: Planogram,
    item: PlanogramItem,
    noise_std: float,
    rng: np.random.RandomState
) -> BoundingBox:
    """Jittered detection box whose center stays strictly inside the cell."""
    cell = cell_rect(planogram, item)
    width = cell.right - cell.left
    height = cell.bottom - cell.top

    cx = (cell.left + cell.right) / 2 + rng.normal(0.0, noise_std)
    cy = (cell.top + cell.bottom) / 2 + rng.normal(0.0, noise_std)
    cx = float(np.clip(cx, cell.left + CENTER_MARGIN * width, cell.right - CENTER_MARGIN * width))
    cy = float(np.clip(cy, cell.top + CENTER_MARGIN * height, cell.bottom - CENTER_MARGIN * height))

    half_w = BOX_FILL * width / 2
    half_h = BOX_FILL * height / 2
    # Clipped to the cell; the clipped center stays strictly inside it
    return BoundingBox(
        left=max(cx - half_w, cell.left),
        top=max(cy - half_h, cell.top),
        right=min(cx + half_w, cell.right),
        bottom=min(cy + half_h, cell.bottom)
    )


def generate_detections(
    planogram: Planogram,
    items: List[PlanogramItem],
    noise_std: float = 0.01,
    missing_rate: float = 0.05,
    misplaced_rate: float = 0.05,
    overstock_rate: float = 0.5,
    label_rate: float = 1.0,
    shuffle: bool = True,
    seed: Optional[int] = None
) -> Tuple[List[Detection], GroundTruth]:
    """
    Generate a synthetic detection snapshot with injected discrepancies.

    Each item normally yields one detection near its cell center. Some are
    dropped (missing), some carry a foreign label (misplaced), and empty
    grid cells may receive a stray detection (overstock).

    Args:
        planogram: Layout to detect against
        items: Planogram items
        noise_std: Standard deviation of center jitter (normalized units)
        missing_rate: Probability an item has no detection
        misplaced_rate: Probability a detection carries a foreign label
        overstock_rate: Probability an empty grid cell holds a stray detection
        label_rate: Probability a correct detection carries a label at all
        shuffle: Randomize detection order
        seed: Random seed for reproducibility

    Returns:
        Tuple[List[Detection], GroundTruth]: Detections and ground truth labels

    Complexity:
        Time: O(n + e) for n items and e empty cells
        Space: O(n + e)
    """
    rng = np.random.RandomState(seed)
    detections: List[Detection] = []
    ground_truth = GroundTruth()

    def next_id() -> str:
        return f"det_{len(detections):04d}"

    for item in items:
        if rng.random_sample() < missing_rate:
            ground_truth.missing_item_ids.append(item.id)
            continue

        box = _box_in_cell(planogram, item, noise_std, rng)
        if rng.random_sample() < misplaced_rate:
            label: Optional[str] = f"FOREIGN_{rng.randint(1, 100):02d}"
            ground_truth.misplaced_item_ids.append(item.id)
        elif rng.random_sample() < label_rate:
            label = item.product_id
        else:
            label = None

        confidence = float(np.clip(rng.normal(0.85, 0.05), 0.0, 1.0))
        detections.append(Detection(id=next_id(), bounding_box=box,
                                    label=label, confidence=confidence))

    # Stray detections go to grid cells without an item
    column_width = _column_width_mm(planogram, items)
    if column_width:
        occupied = {(i.shelf_index, i.x_mm // column_width) for i in items}
        num_cols = planogram.shelf_width_mm // column_width
        for row in range(planogram.shelves_count):
            for col in range(num_cols):
                if (row, col) in occupied or rng.random_sample() >= overstock_rate:
                    continue
                ghost = PlanogramItem(
                    id="", planogram_id=planogram.id, product_id="",
                    shelf_index=row, x_mm=col * column_width, width_mm=column_width
                )
                det_id = next_id()
                detections.append(Detection(
                    id=det_id,
                    bounding_box=_box_in_cell(planogram, ghost, noise_std, rng),
                    label=None
                ))
                ground_truth.overstock_detection_ids.append(det_id)

    if shuffle and detections:
        order = rng.permutation(len(detections))
        detections = [detections[i] for i in order]

    return detections, ground_truth


def _column_width_mm(planogram: Planogram, items: List[PlanogramItem]) -> int:
    """Column width of a grid planogram, or 0 if it cannot be inferred."""
    widths = {i.width_mm for i in items}
    if len(widths) != 1:
        return 0
    width = widths.pop()
    if width <= 0 or planogram.shelf_width_mm % width:
        return 0
    return width


def generate_scenario(
    num_rows: int = 3,
    num_cols: int = 4,
    column_width_mm: int = DEFAULT_COLUMN_WIDTH_MM,
    fill_rate: float = 0.9,
    noise_std: float = 0.01,
    missing_rate: float = 0.05,
    misplaced_rate: float = 0.05,
    overstock_rate: float = 0.5,
    sku_pattern: SKUPattern = SKUPattern.UNIQUE,
    seed: Optional[int] = None,
    scenario_id: Optional[str] = None
) -> ComparisonScenario:
    """
    Generate a complete scenario (planogram + items + detections + ground truth).

    This is the main entry point for synthetic data generation.

    Example:
        >>> scenario = generate_scenario(3, 4, seed=42)
        >>> print(f"Items: {len(scenario.items)}")
        >>> print(f"Detections: {len(scenario.detections)}")
    """
    if scenario_id is None:
        suffix = seed if seed is not None else "unseeded"
        scenario_id = f"scenario_{num_rows}x{num_cols}_{suffix}"

    planogram, items = generate_planogram(
        num_rows=num_rows,
        num_cols=num_cols,
        column_width_mm=column_width_mm,
        fill_rate=fill_rate,
        sku_pattern=sku_pattern,
        seed=seed
    )

    # Use different seed for detections to maintain independence
    detection_seed = seed + 1000 if seed is not None else None
    detections, ground_truth = generate_detections(
        planogram, items,
        noise_std=noise_std,
        missing_rate=missing_rate,
        misplaced_rate=misplaced_rate,
        overstock_rate=overstock_rate,
        seed=detection_seed
    )

    return ComparisonScenario(
        planogram=planogram,
        items=items,
        detections=detections,
        ground_truth=ground_truth,
        scenario_id=scenario_id
    )


def generate_multiple_scenarios(
    num_scenarios: int = 10,
    base_seed: int = 42,
    **kwargs
) -> List[ComparisonScenario]:
    """
    Generate multiple scenarios for batch testing.

    Args:
        num_scenarios: Number of scenarios to generate
        base_seed: Starting seed for reproducibility
        **kwargs: Arguments passed to generate_scenario
    """
    return [
        generate_scenario(seed=base_seed + i * 100, scenario_id=f"batch_{i:04d}", **kwargs)
        for i in range(num_scenarios)
    ]


def save_scenario_to_json(scenario: ComparisonScenario, output_dir: str = "data") -> str:
    """
    Save scenario to ``<output_dir>/scenario_<id>.json``.

    Returns:
        Path of the written file
    """
    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)

    scenario_file = output_path / f"scenario_{scenario.scenario_id or 'default'}.json"
    scenario.save_to_json(str(scenario_file))
    return str(scenario_file)


def load_scenario_from_json(filepath: str) -> ComparisonScenario:
    """Load a scenario from JSON file."""
    return ComparisonScenario.load_from_json(filepath)


def visualize_scenario(
    scenario: ComparisonScenario,
    save_path: Optional[str] = None
) -> None:
    """
    Draw planogram cells and detection boxes in normalized image space.

    - Blue rectangles: planogram cells, labelled with the product id
    - Red rectangles: detections
    - Orange crosses: items flagged missing in ground truth

    Note:
        Requires matplotlib (the ``viz`` extra).
    """
    import matplotlib.pyplot as plt
    from matplotlib.patches import Rectangle

    fig, ax = plt.subplots(figsize=(10, 8))

    missing = set(scenario.ground_truth.missing_item_ids) if scenario.ground_truth else set()
    for item in scenario.items:
        cell = cell_rect(scenario.planogram, item)
        ax.add_patch(Rectangle(
            (cell.left, cell.top), cell.right - cell.left, cell.bottom - cell.top,
            fill=False, edgecolor='blue', linewidth=1.0, alpha=0.7
        ))
        ax.text(cell.left + 0.01, cell.top + 0.03, item.product_id, fontsize=7, color='blue')
        if item.id in missing:
            ax.scatter([(cell.left + cell.right) / 2], [(cell.top + cell.bottom) / 2],
                       c='orange', s=200, marker='x', linewidths=3)

    for detection in scenario.detections:
        box = detection.bounding_box
        ax.add_patch(Rectangle(
            (box.left, box.top), box.width, box.height,
            fill=False, edgecolor='red', linewidth=1.5, alpha=0.7
        ))

    ax.set_xlim(0, 1)
    ax.set_ylim(1, 0)
    ax.set_title(f'Scenario: {scenario.scenario_id}')
    ax.set_aspect('equal', adjustable='box')

    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches='tight')
        print(f"Visualization saved to {save_path}")
    else:
        plt.show()

    plt.close(fig)
