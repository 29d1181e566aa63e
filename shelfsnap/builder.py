"""
Planogram Builder

Grid-based construction of a planogram: the user picks a number of shelves
and columns, assigns a product to each cell (or leaves it empty) and saves.
Every column has the same physical width, so the saved planogram is
``columns × column_width_mm`` wide and each non-empty cell becomes one
single-facing PlanogramItem.

Example:
    >>> grid = PlanogramGrid(rows=3, cols=4)
    >>> grid.assign(0, 0, "milk")
    >>> planogram, items = grid.build(name="Dairy bay")
"""

import uuid
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .data_models import Planogram, PlanogramItem, Product

MIN_ROWS, MAX_ROWS = 1, 6
MIN_COLS, MAX_COLS = 1, 8
DEFAULT_ROWS = 3
DEFAULT_COLS = 4
DEFAULT_COLUMN_WIDTH_MM = 400

# Offered when the catalogue is empty
PLACEHOLDER_PRODUCTS = (
    Product(id="milk", sku="milk", name="Milk", width_mm=100),
    Product(id="bread", sku="bread", name="Bread", width_mm=120),
    Product(id="cereal", sku="cereal", name="Cereal", width_mm=150),
    Product(id="juice", sku="juice", name="Orange Juice", width_mm=200),
)


def _new_id() -> str:
    return str(uuid.uuid4())


class PlanogramGrid:
    """
    Editable rows × columns grid of optional product ids.

    Attributes:
        rows: Number of shelves (1-6)
        cols: Number of columns per shelf (1-8)
        column_width_mm: Physical width of one column
    """

    def __init__(
        self,
        rows: int = DEFAULT_ROWS,
        cols: int = DEFAULT_COLS,
        column_width_mm: int = DEFAULT_COLUMN_WIDTH_MM,
        existing: Optional[Planogram] = None,
        catalogue: Sequence[Product] = ()
    ):
        if column_width_mm <= 0:
            raise ValueError(f"column_width_mm must be positive, got {column_width_mm}")
        if existing is not None:
            rows = existing.shelves_count
        self._check_dimensions(rows, cols)
        self.rows = rows
        self.cols = cols
        self.column_width_mm = column_width_mm
        self.existing = existing
        self._cells: List[List[Optional[str]]] = [[None] * cols for _ in range(rows)]
        self.catalogue: Dict[str, Product] = {
            p.id: p for p in (catalogue or PLACEHOLDER_PRODUCTS)
        }

    @staticmethod
    def _check_dimensions(rows: int, cols: int) -> None:
        if not MIN_ROWS <= rows <= MAX_ROWS:
            raise ValueError(f"rows must be in [{MIN_ROWS}, {MAX_ROWS}], got {rows}")
        if not MIN_COLS <= cols <= MAX_COLS:
            raise ValueError(f"cols must be in [{MIN_COLS}, {MAX_COLS}], got {cols}")

    def _check_cell(self, row: int, col: int) -> None:
        if not (0 <= row < self.rows and 0 <= col < self.cols):
            raise ValueError(f"Cell ({row}, {col}) outside {self.rows}x{self.cols} grid")

    def resize(self, rows: int, cols: int) -> None:
        """Change dimensions, keeping selections that still fit."""
        self._check_dimensions(rows, cols)
        cells = self._cells[:rows]
        cells += [[None] * cols for _ in range(rows - len(cells))]
        self._cells = [(row + [None] * cols)[:cols] for row in cells]
        self.rows = rows
        self.cols = cols

    def assign(self, row: int, col: int, product_id: str) -> None:
        self._check_cell(row, col)
        self._cells[row][col] = product_id

    def clear(self, row: int, col: int) -> None:
        self._check_cell(row, col)
        self._cells[row][col] = None

    def get(self, row: int, col: int) -> Optional[str]:
        self._check_cell(row, col)
        return self._cells[row][col]

    def assign_product(self, row: int, col: int, product: Product) -> None:
        """Assign a catalogue product, adding it to the catalogue if new."""
        self.catalogue.setdefault(product.id, product)
        self.assign(row, col, product.id)

    def cell_label(self, row: int, col: int) -> str:
        """Product name shown in a cell, "Select" when empty or unknown."""
        product = self.catalogue.get(self.get(row, col) or "")
        return product.name if product else "Select"

    @property
    def shelf_width_mm(self) -> int:
        return self.cols * self.column_width_mm

    def build(
        self,
        name: Optional[str] = None,
        section: Optional[str] = None,
        id_factory: Callable[[], str] = _new_id
    ) -> Tuple[Planogram, List[PlanogramItem]]:
        """
        Construct the planogram and one item per non-empty cell.

        Items are emitted row by row, left to right. An existing planogram
        keeps its id, name and section unless overridden.

        Returns:
            Tuple[Planogram, List[PlanogramItem]]
        """
        existing = self.existing
        planogram = Planogram(
            id=existing.id if existing else id_factory(),
            name=name or (existing.name if existing else "Untitled"),
            section=section if section is not None else (existing.section if existing else None),
            store_id=existing.store_id if existing else None,
            shelves_count=self.rows,
            shelf_width_mm=self.shelf_width_mm,
            created_at=datetime.now(timezone.utc).isoformat()
        )

        items: List[PlanogramItem] = []
        for row in range(self.rows):
            for col in range(self.cols):
                product_id = self._cells[row][col]
                if product_id is None:
                    continue
                items.append(PlanogramItem(
                    id=id_factory(),
                    planogram_id=planogram.id,
                    product_id=product_id,
                    shelf_index=row,
                    x_mm=col * self.column_width_mm,
                    width_mm=self.column_width_mm,
                    facings=1
                ))
        return planogram, items
