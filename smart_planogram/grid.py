"""Grid geometry helpers for planogram occupancy checks."""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Iterable, Optional, Sequence, Tuple

if TYPE_CHECKING:  # pragma: no cover
    from smart_planogram.enterprise.core.models import Planogram, Position, Product


def build_occupancy_index(
    products: Iterable["Product"],
    exclude_product_id: Optional[str] = None,
) -> Dict[Tuple[int, int], str]:
    """Map every occupied ``(row, col)`` cell to the id of the product holding it."""

    index: Dict[Tuple[int, int], str] = {}
    for product in products:
        if exclude_product_id is not None and product.id == exclude_product_id:
            continue
        for pos in product.positions:
            index[(pos.row, pos.col)] = product.id
    return index


def max_occupied_dimensions(products: Iterable["Product"]) -> Tuple[int, int]:
    """Return the highest occupied row and column index (``(0, 0)`` when empty)."""

    max_row = 0
    max_col = 0
    for product in products:
        for pos in product.positions:
            max_row = max(max_row, pos.row)
            max_col = max(max_col, pos.col)
    return max_row, max_col


def is_position_occupied(
    products: Iterable["Product"],
    row: int,
    col: int,
    exclude_product_id: Optional[str] = None,
) -> bool:
    """True if a product other than ``exclude_product_id`` holds ``(row, col)``."""

    return (row, col) in build_occupancy_index(products, exclude_product_id)


def has_duplicate_cells(positions: Sequence["Position"]) -> bool:
    cells = [(pos.row, pos.col) for pos in positions]
    return len(cells) != len(set(cells))


def validate_positions(
    planogram: "Planogram",
    product_id: Optional[str],
    positions: Sequence["Position"],
) -> bool:
    """Check candidate positions against the grid bounds and other products.

    Cells already held by ``product_id`` itself are ignored so a product can
    keep the cells it occupies. The facings bound is left to the caller.
    """

    grid = planogram.grid_size
    if not all(grid.contains(pos) for pos in positions):
        return False

    occupied = build_occupancy_index(planogram.products, product_id)
    return not any((pos.row, pos.col) in occupied for pos in positions)
