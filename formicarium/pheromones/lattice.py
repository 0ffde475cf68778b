"""Mapping between tunnel-cell links and the pheromone lattice.

Pheromone sits on the *link* between two neighbouring cells, not on a
cell.  Every cell has at most one link to its right and one link below
it, so links fit in a lattice with the same width as the cell grid and
twice its height:

- even lattice rows ``2y`` hold horizontal links ``(x, y)-(x + 1, y)``
  at column ``x``;
- odd lattice rows ``2y + 1`` hold vertical links ``(x, y)-(x, y + 1)``
  at column ``x``.

Both functions return ``None`` rather than raising when no link exists;
callers treat that as "skip".

The forward mapping is authoritative: ``lattice_to_link`` is its exact
inverse, so a horizontal entry at column ``x`` joins ``x`` and ``x + 1``.
"""

from __future__ import annotations

from formicarium.world.position import CellCoord

LatticeCoord = tuple[int, int]
Link = tuple[CellCoord, CellCoord]


def link_to_lattice(a: CellCoord, b: CellCoord) -> LatticeCoord | None:
    """Return the lattice coordinate of the link between two cells.

    Args:
        a: First cell ``(x, y)``.
        b: Second cell ``(x, y)``.  Order does not matter.

    Returns:
        ``(x, y1 + y2)`` for a vertical pair, ``(min(x1, x2), 2 * y)`` for
        a horizontal pair, or None if the cells are not 4-neighbours.
    """
    (x1, y1), (x2, y2) = a, b
    if x1 == x2 and abs(y1 - y2) == 1:
        return (x1, y1 + y2)
    if y1 == y2 and abs(x1 - x2) == 1:
        return (min(x1, x2), 2 * y1)
    return None


def lattice_to_link(
    lattice: LatticeCoord,
    *,
    width: int | None = None,
    height: int | None = None,
) -> Link | None:
    """Return the two cells joined by the link at a lattice coordinate.

    Args:
        lattice: Lattice coordinate ``(x, ly)``.
        width: Cell-grid width.  When given, links leaving the grid on the
            right are rejected.
        height: Cell-grid height.  When given, links leaving the grid at
            the bottom are rejected.

    Returns:
        The cell pair in ascending order, or None for an out-of-range
        coordinate.
    """
    x, ly = lattice
    if x < 0 or ly < 0:
        return None
    y = ly // 2
    if ly % 2 == 0:
        a, b = (x, y), (x + 1, y)
    else:
        a, b = (x, y), (x, y + 1)
    if width is not None and b[0] >= width:
        return None
    if height is not None and b[1] >= height:
        return None
    return (a, b)


def path_links(cells: list[CellCoord]) -> list[LatticeCoord]:
    """Return the lattice coordinates of consecutive links along a path.

    Consecutive pairs that are not 4-neighbours are skipped.
    """
    links: list[LatticeCoord] = []
    for a, b in zip(cells, cells[1:]):
        coord = link_to_lattice(a, b)
        if coord is not None:
            links.append(coord)
    return links
