"""
Board model for the rice paddy territory game.

The board is a fixed size x size grid of Tiles plus a parallel numpy grid
of rice levels. Rice levels exist for every cell, but only grow on tiles
owned by a side.
"""

from typing import Iterator, List, Optional, Tuple

import numpy as np

from models import Ownership, Side, Tile, TileState


class Board:
    """Grid of tiles with per-tile rice levels."""

    def __init__(self, tiles: List[List[Tile]], rice_levels: Optional[np.ndarray] = None):
        size = len(tiles)
        if any(len(row) != size for row in tiles):
            raise ValueError("Board tiles must form a square grid")
        self.tiles = tiles
        if rice_levels is None:
            rice_levels = np.ones((size, size), dtype=float)
        rice_levels = np.asarray(rice_levels, dtype=float)
        if rice_levels.shape != (size, size):
            raise ValueError(f"Rice grid shape {rice_levels.shape} does not match board size {size}")
        self.rice_levels = rice_levels

    @property
    def size(self) -> int:
        return len(self.tiles)

    @property
    def width(self) -> int:
        return len(self.tiles)

    @property
    def height(self) -> int:
        return len(self.tiles[0])

    @property
    def total_tiles(self) -> int:
        return self.width * self.height

    def within_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def tile_at(self, x: int, y: int) -> Tile:
        return self.tiles[x][y]

    def rice_at(self, x: int, y: int) -> float:
        return float(self.rice_levels[x, y])

    def set_rice_at(self, x: int, y: int, amount: float) -> None:
        self.rice_levels[x, y] = amount

    def is_controlled_by(self, x: int, y: int, side: Side) -> bool:
        return self.tiles[x][y].owner == side.index

    def is_watered(self, x: int, y: int) -> bool:
        return self.tiles[x][y].watered

    def is_housed(self, x: int, y: int) -> bool:
        return self.tiles[x][y].housed

    def set_start_tile(self, x: int, y: int, side: Side) -> None:
        """Give a side its home tile for free."""
        self.tiles[x][y].set_occupied(side.index)

    def claim(self, x: int, y: int, side: Side) -> bool:
        """
        Try to claim a tile for a side.

        Fails without touching anything if the tile is occupied or the side
        cannot pay the tile's unit cost. On success the owner is set and the
        cost is deducted in the same call.
        """
        tile = self.tiles[x][y]
        if tile.occupied:
            return False
        if side.units < tile.required_units:
            return False
        tile.set_occupied(side.index)
        side.units -= tile.required_units
        return True

    def water(self, x: int, y: int) -> None:
        self.tiles[x][y].watered = True

    def build_house(self, x: int, y: int) -> None:
        self.tiles[x][y].housed = True

    def tiles_controlled_by(self, side: Side) -> Iterator[Tuple[int, int]]:
        """Yield coordinates of the side's tiles in ascending (x, y) order."""
        for x in range(self.width):
            for y in range(self.height):
                if self.tiles[x][y].owner == side.index:
                    yield x, y

    def count_controlled(self, side: Side) -> int:
        return sum(1 for _ in self.tiles_controlled_by(side))

    def _mask(self, predicate) -> np.ndarray:
        return np.array([[predicate(tile) for tile in row] for row in self.tiles], dtype=bool)

    def grow_rice(self, side: Side) -> None:
        """
        Grow rice on every tile owned by the side.

        Watered tiles gain 2 up to a cap of 3, unwatered tiles gain 1 up to
        a cap of 2. Tiles of the other side are left alone.
        """
        owned = self._mask(lambda tile: tile.owner == side.index)
        watered = self._mask(lambda tile: tile.watered)
        levels = self.rice_levels
        grown = np.where(watered,
                         np.minimum(levels + 2, 3),
                         np.minimum(levels + 1, 2))
        self.rice_levels = np.where(owned, grown, levels)

    def state_label(self, x: int, y: int, perspective: Side) -> Tuple[TileState, Optional[Ownership]]:
        """Read-only projection of a tile for renderers."""
        tile = self.tiles[x][y]
        if not tile.occupied:
            return TileState.EMPTY, None

        ownership = Ownership.SELF if tile.owner == perspective.index else Ownership.OTHER
        if tile.housed:
            state = TileState.HOUSE_WATERED if tile.watered else TileState.HOUSE
        else:
            state = TileState.RICE_WATERED if tile.watered else TileState.RICE
        return state, ownership

    def state_key(self, x: int, y: int, perspective: Side) -> str:
        """String form of state_label, e.g. 'EMPTY', 'RICE1' or 'HOUSEWATER2'."""
        state, ownership = self.state_label(x, y, perspective)
        if ownership is None:
            return state.value
        return f"{state.value}{ownership.value}"
