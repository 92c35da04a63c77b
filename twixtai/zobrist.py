"""Zobrist hashing of peg neighbourhoods and per-pattern move statistics."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from functools import lru_cache

from twixtai.board import Board, Player, Position
from twixtai.pcg import Pcg64
from twixtai.serializer import Game, MoveType

_LINK_STATES = 256
_PLAYERS = (Player.RED, Player.BLACK)
_SEED = 1
_MAX_ZOOM_COUNT = 255

_HEADER = struct.Struct("<QB")
_OBSERVATION = struct.Struct("<4I")


def positions_for_zoom(zoom: int) -> int:
    """Index of the first offset at Manhattan distance zoom.

    It is also the number of offsets strictly closer than zoom.
    """
    if zoom < 1:
        raise ValueError(f"zoom must be at least 1, got {zoom}")
    return 1 + 2 * zoom * (zoom - 1)


def position_index(dx: int, dy: int) -> int:
    """A distinct index for every offset, growing with Manhattan distance."""
    distance = abs(dx) + abs(dy)
    if distance == 0:
        return 0
    if dx > 0 and dy >= 0:
        offset = dy
    elif dx <= 0 and dy > 0:
        offset = distance - dx
    elif dx < 0 and dy <= 0:
        offset = 2 * distance - dy
    else:
        offset = 3 * distance + dx
    return positions_for_zoom(distance) + offset


def bitstring_index(dx: int, dy: int, player: Player, links: int) -> int:
    """Index of the bitstring for a peg of a player with given links at an offset."""
    if player not in _PLAYERS:
        raise ValueError(f"only red or black pegs have bitstrings, got {player!r}")
    if not 0 <= links < _LINK_STATES:
        raise ValueError(f"links must fit in one byte, got {links}")
    return (position_index(dx, dy) * len(_PLAYERS) + (player - 1)) * _LINK_STATES + links


@lru_cache(maxsize=None)
def make_bitstrings(zoom: int) -> tuple[int, ...]:
    """Random 64-bit strings covering every peg state within a zoom radius."""
    count = positions_for_zoom(zoom + 1) * len(_PLAYERS) * _LINK_STATES
    rng = Pcg64.seeded(_SEED)
    return tuple(rng.pull() for _ in range(count))


def neighbourhood_hash(
    position: Position, board: Board, zoom: int, bitstrings: tuple[int, ...]
) -> int:
    """XOR of the bitstrings of every peg within zoom of a position.

    Empty holes and holes off the board contribute nothing.
    """
    value = 0
    for dx in range(-zoom, zoom + 1):
        span = zoom - abs(dx)
        for dy in range(-span, span + 1):
            cell = Position(position.x + dx, position.y + dy)
            if not (0 <= cell.x < board.size and 0 <= cell.y < board.size):
                continue
            node = board.peek(cell)
            if node.player is Player.NONE:
                continue
            value ^= bitstrings[bitstring_index(dx, dy, node.player, node.links)]
    return value


@dataclass
class Observation:
    """How often a pattern was seen by each player and how often it was chosen."""

    black_visited: int = 0
    black_chosen: int = 0
    red_visited: int = 0
    red_chosen: int = 0

    def ratio(self, player: Player) -> float | None:
        """Chosen over visited for a player, or None if never visited."""
        if player is Player.BLACK and self.black_visited:
            return self.black_chosen / self.black_visited
        if player is Player.RED and self.red_visited:
            return self.red_chosen / self.red_visited
        return None


class Zobrist:
    """Tables of observations indexed by neighbourhood hashes, one per zoom level."""

    def __init__(self, table_size: int, zoom_count: int) -> None:
        if table_size < 1:
            raise ValueError(f"table size must be positive, got {table_size}")
        if not 1 <= zoom_count <= _MAX_ZOOM_COUNT:
            raise ValueError(f"zoom count must be in 1..{_MAX_ZOOM_COUNT}, got {zoom_count}")
        self.table_size = table_size
        self.zoom_count = zoom_count
        self.observations = [
            [Observation() for _ in range(table_size)] for _ in range(zoom_count)
        ]
        self.bitstrings = [make_bitstrings(zoom) for zoom in range(1, zoom_count + 1)]

    def __repr__(self) -> str:
        return f"Zobrist(table_size={self.table_size}, zoom_count={self.zoom_count})"

    def _slot(self, zoom: int, position: Position, board: Board) -> Observation:
        value = neighbourhood_hash(position, board, zoom, self.bitstrings[zoom - 1])
        return self.observations[zoom - 1][value % self.table_size]

    def evaluate(self, position: Position, player: Player, board: Board) -> float:
        """Chosen ratio for the widest zoom at which the player has observations."""
        if player not in _PLAYERS:
            raise ValueError(f"cannot evaluate for {player!r}")
        for zoom in range(self.zoom_count, 0, -1):
            ratio = self._slot(zoom, position, board).ratio(player)
            if ratio is not None:
                return ratio
        raise LookupError(f"no observation for {player.name} around {position}")

    def populate(self, game: Game) -> None:
        """Record the peg moves of a game, taken in pairs."""
        board = Board(game.size)
        moves = game.moves
        index = 0
        while index < len(moves):
            move = moves[index]
            if move.type is not MoveType.PEG:
                index += 1
                continue
            board.play(move.player, move.peg)
            reply = moves[index + 1] if index + 1 < len(moves) else None
            if reply is None or reply.type is not MoveType.PEG:
                index += 2
                continue
            for zoom in range(self.zoom_count, 0, -1):
                slot = self._slot(zoom, move.peg, board)
                if move.player is Player.BLACK:
                    slot.red_visited += 1
                if move.player is Player.RED:
                    slot.black_visited += 1
                if reply.player is Player.BLACK:
                    slot.black_chosen += 1
                if reply.player is Player.RED:
                    slot.red_chosen += 1
            board.play(reply.player, reply.peg)
            index += 2

    def to_bytes(self) -> bytes:
        """Table size, zoom count and every observation, ended by a zero byte."""
        parts = [_HEADER.pack(self.table_size, self.zoom_count)]
        parts.extend(
            _OBSERVATION.pack(
                obs.black_visited, obs.black_chosen, obs.red_visited, obs.red_chosen
            )
            for table in self.observations
            for obs in table
        )
        parts.append(b"\x00")
        return b"".join(parts)

    @classmethod
    def from_bytes(cls, data: bytes) -> Zobrist:
        """Rebuild tables written by to_bytes; bitstrings are regenerated."""
        if len(data) < _HEADER.size + 1:
            raise ValueError("data is too short for a header")
        table_size, zoom_count = _HEADER.unpack_from(data)
        expected = _HEADER.size + table_size * zoom_count * _OBSERVATION.size + 1
        if len(data) != expected:
            raise ValueError(f"expected {expected} bytes, got {len(data)}")
        if data[-1] != 0:
            raise ValueError("data does not end with a zero byte")
        zobrist = cls(table_size, zoom_count)
        records = [
            Observation(*fields)
            for fields in _OBSERVATION.iter_unpack(data[_HEADER.size:-1])
        ]
        zobrist.observations = [
            records[level * table_size:(level + 1) * table_size]
            for level in range(zoom_count)
        ]
        return zobrist