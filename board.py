# board.py
from __future__ import annotations
from dataclasses import dataclass
from collections import deque
from typing import Iterable, List, Optional, Tuple

EMPTY, RED, BLUE = 0, 1, 2
TAGS = (EMPTY, RED, BLUE)
NEI = [(-1, 0), (-1, 1), (0, -1), (0, 1), (1, -1), (1, 0)]

NORTH, SOUTH, WEST, EAST = "north", "south", "west", "east"

Coord = Tuple[int, int]


@dataclass(frozen=True)
class Move:
    r: int
    c: int


@dataclass(frozen=True)
class Swap:
    """Take over the opponent's first move instead of placing a new stone."""


SWAP = Swap()


def other(player: int) -> int:
    return RED if player == BLUE else BLUE


def build_neighbors(n: int) -> Tuple[Tuple[int, ...], ...]:
    """Neighbour table by flat index: r * n + c."""
    table = []
    for r in range(n):
        for c in range(n):
            row = []
            for dr, dc in NEI:
                nr, nc = r + dr, c + dc
                if 0 <= nr < n and 0 <= nc < n:
                    row.append(nr * n + nc)
            table.append(tuple(row))
    return tuple(table)


class Board:
    def __init__(self, size: int = 11, _neighbors: Optional[Tuple[Tuple[int, ...], ...]] = None):
        if size < 1:
            raise ValueError(f"board size must be positive, got {size}")
        self.size = size
        self._nei = _neighbors if _neighbors is not None else build_neighbors(size)
        self.tags: List[int] = [EMPTY] * (size * size)

    def in_bounds(self, r: int, c: int) -> bool:
        return 0 <= r < self.size and 0 <= c < self.size

    def index(self, r: int, c: int) -> int:
        if not self.in_bounds(r, c):
            raise IndexError(f"cell ({r}, {c}) is off a {self.size}x{self.size} board")
        return r * self.size + c

    def coord(self, i: int) -> Coord:
        return divmod(i, self.size)

    def neighbor_indices(self, i: int) -> Tuple[int, ...]:
        return self._nei[i]

    def neighbors(self, r: int, c: int) -> Tuple[Coord, ...]:
        n = self.size
        return tuple(divmod(j, n) for j in self._nei[self.index(r, c)])

    def get_tag(self, r: int, c: int) -> int:
        return self.tags[self.index(r, c)]

    def set_tag(self, r: int, c: int, tag: int):
        if tag not in TAGS:
            raise ValueError(f"unknown tag {tag!r}")
        self.tags[self.index(r, c)] = tag

    def cells(self) -> Iterable[Coord]:
        n = self.size
        for r in range(n):
            for c in range(n):
                yield r, c

    def empty_cells(self) -> List[Coord]:
        return [self.coord(i) for i, t in enumerate(self.tags) if t == EMPTY]

    def is_full(self) -> bool:
        return EMPTY not in self.tags

    def border(self, side: str) -> List[Coord]:
        n = self.size
        if side == NORTH:
            return [(0, c) for c in range(n)]
        if side == SOUTH:
            return [(n - 1, c) for c in range(n)]
        if side == WEST:
            return [(r, 0) for r in range(n)]
        if side == EAST:
            return [(r, n - 1) for r in range(n)]
        raise ValueError(f"unknown border {side!r}")

    def rows(self) -> List[List[int]]:
        n = self.size
        return [self.tags[r * n:(r + 1) * n] for r in range(n)]

    def clone(self) -> "Board":
        b = Board(self.size, _neighbors=self._nei)
        b.tags = self.tags[:]
        return b


def exists_path(board: Board, sources: Iterable[Coord], dests: Iterable[Coord], forbidden) -> bool:
    """True if some source reaches some destination through cells whose tag is not forbidden."""
    tags = board.tags
    forbidden = frozenset(forbidden)
    goal = {board.index(r, c) for r, c in dests}
    goal = {i for i in goal if tags[i] not in forbidden}
    if not goal:
        return False

    vis = set()
    q = deque()
    for r, c in sources:
        i = board.index(r, c)
        if tags[i] not in forbidden and i not in vis:
            vis.add(i)
            q.append(i)

    while q:
        i = q.popleft()
        if i in goal:
            return True
        for j in board.neighbor_indices(i):
            if j not in vis and tags[j] not in forbidden:
                vis.add(j)
                q.append(j)
    return False


def has_won(board: Board, player: int) -> bool:
    if player == RED:
        # top -> bottom
        return exists_path(board, board.border(NORTH), board.border(SOUTH), (EMPTY, BLUE))
    if player == BLUE:
        # left -> right
        return exists_path(board, board.border(WEST), board.border(EAST), (EMPTY, RED))
    raise ValueError(f"not a player: {player!r}")


def winner(board: Board) -> int:
    if has_won(board, RED):
        return RED
    if has_won(board, BLUE):
        return BLUE
    return EMPTY


SYMBOLS = {EMPTY: ".", RED: "X", BLUE: "O"}


def format_board(board: Board) -> str:
    """ASCII drawing: X runs north-south (x markers), O runs west-east (o markers)."""
    n = board.size
    lines = []
    markers = "      " + "   ".join("x" * n)
    header = "     " + "  ".join(f"{c:2d}" for c in range(n))
    lines.append(markers)
    lines.append(header)
    for r, row in enumerate(board.rows()):
        indent = "  " * r
        cells = " - ".join(SYMBOLS[t] for t in row)
        lines.append(f"{indent}o {r:2d}  {cells} {r:2d}  o")
        if r < n - 1:
            lines.append("  " * (r + 1) + "     " + "\\ / " * (n - 1) + "\\")
    lines.append("  " * (n - 1) + header)
    lines.append("  " * (n - 1) + markers)
    return "\n".join(lines)
