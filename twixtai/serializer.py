"""Reading game records and their metadata."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar

from twixtai.board import Board, Player, Position

_NUMBER = re.compile(r"\s*([+-]?\d+)")
_DIGITS = re.compile(r"\d+")
_LIMIT = 1_000_000_000
_TWIXTLIVE_PREFIX = "twixtlive,"


class SerializationError(ValueError):
    """Raised when a record cannot be parsed or written."""


class MetadataProvider(Enum):
    """Origin of a game record's metadata."""

    TWIXTLIVE = 0


@dataclass
class TwixtLiveMetadata:
    """Metadata of a game played on TwixtLive; black_id is -1 if unknown."""

    game_id: int
    timestamp: int
    white_id: int
    black_id: int = -1

    provider: ClassVar[MetadataProvider] = MetadataProvider.TWIXTLIVE

    def serialize(self) -> str:
        """The metadata in its text form."""
        text = f"twixtlive,i{self.game_id},t{self.timestamp},w{self.white_id}"
        if self.black_id != -1:
            text += f",b{self.black_id}"
        return text


class MoveType(Enum):
    """Kind of entry in a game record."""

    PEG = 0
    SWAP = 1
    RESIGN = 2
    WIN = 3


@dataclass
class Move:
    """One entry of a game record; peg is (-1, -1) unless it is a peg move."""

    type: MoveType
    player: Player
    peg: Position = Position(-1, -1)


@dataclass
class Game:
    """A parsed game record."""

    size: int
    metadata: TwixtLiveMetadata | None = None
    moves: list[Move] = field(default_factory=list)
    board: Board | None = None
    finished: bool = False
    resigned: bool = False
    winner: Player = Player.NONE

    @property
    def provider(self) -> MetadataProvider | None:
        return self.metadata.provider if self.metadata is not None else None


def _read_number(text: str, pos: int, what: str, limit: int = _LIMIT) -> tuple[int, int]:
    match = _NUMBER.match(text, pos)
    if match is None:
        raise SerializationError(f"expected {what} at offset {pos}")
    value = int(match.group(1))
    if not 0 <= value <= limit:
        raise SerializationError(f"{what} {value} is out of range")
    return value, match.end()


def _field(text: str, pos: int, letter: str, what: str) -> tuple[int, int]:
    if not text.startswith(letter, pos):
        raise SerializationError(f"expected '{letter}' for {what} at offset {pos}")
    return _read_number(text, pos + 1, what)


def _comma(text: str, pos: int) -> int:
    if not text.startswith(",", pos):
        raise SerializationError(f"expected ',' at offset {pos}")
    return pos + 1


def parse_twixtlive_metadata(text: str) -> tuple[TwixtLiveMetadata, str]:
    """Parse 'i<id>,t<time>,w<white>[,b<black>]'; returns it and the rest."""
    game_id, pos = _field(text, 0, "i", "game id")
    timestamp, pos = _field(text, _comma(text, pos), "t", "timestamp")
    white_id, pos = _field(text, _comma(text, pos), "w", "white id")
    black_id = -1
    if text.startswith(",b", pos):
        black_id, pos = _field(text, pos + 1, "b", "black id")
    if pos < len(text) and text[pos] != ",":
        raise SerializationError(f"expected ',' at offset {pos}")
    return TwixtLiveMetadata(game_id, timestamp, white_id, black_id), text[pos:]


def parse_metadata(text: str) -> tuple[TwixtLiveMetadata | None, str]:
    """Parse metadata of a known provider; None and the text if there is none."""
    if text.startswith(_TWIXTLIVE_PREFIX):
        return parse_twixtlive_metadata(text[len(_TWIXTLIVE_PREFIX):])
    return None, text


def serialize_metadata(metadata: TwixtLiveMetadata) -> str:
    """The text form of metadata from a known provider."""
    if isinstance(metadata, TwixtLiveMetadata):
        return metadata.serialize()
    raise TypeError(f"unknown metadata type {type(metadata).__name__}")


class _Stage(Enum):
    PLAYER = 0
    ACTION = 1
    COORDINATES = 2
    CLOSE = 3


_PLAYERS = {"R": Player.RED, "B": Player.BLACK}


def parse_game(text: str) -> Game:
    """Parse '<size>,[metadata,]<moves>'.

    A move is a player letter R or B followed by '[<letters><number>]' for
    a peg, 'R' for a resignation or 'W' for a win; parsing stops after a
    resignation or a win. Letters count in base 26 with A as 1 and the
    first letter least significant; they give the peg's y, the number its x.
    """
    size, pos = _read_number(text, 0, "board size")
    metadata, rest = parse_metadata(text[_comma(text, pos):])
    game = Game(size=size, metadata=metadata)

    stage = _Stage.PLAYER
    player = Player.NONE
    letters, weight, number = 0, 1, 0
    i = 0
    while i < len(rest):
        char = rest[i]
        if char == ",":
            i += 1
            continue
        if stage is _Stage.PLAYER and char in _PLAYERS:
            player = _PLAYERS[char]
            stage = _Stage.ACTION
            i += 1
            continue
        if stage is _Stage.ACTION:
            if char == "[":
                stage = _Stage.COORDINATES
                i += 1
                continue
            if char == "R":
                game.moves.append(Move(MoveType.RESIGN, player))
                break
            if char == "W":
                game.moves.append(Move(MoveType.WIN, player))
                break
        if stage is _Stage.COORDINATES:
            if "A" <= char <= "Z":
                letters += weight * (ord(char) - ord("A") + 1)
                weight *= 26
                i += 1
                continue
            if "0" <= char <= "9":
                if not 0 <= letters <= size:
                    raise SerializationError(f"row {letters} is out of range")
                match = _DIGITS.match(rest, i)
                number = int(match.group())
                if number > size:
                    raise SerializationError(f"column {number} is out of range")
                stage = _Stage.CLOSE
                i = match.end()
                continue
        if stage is _Stage.CLOSE and char == "]":
            game.moves.append(Move(MoveType.PEG, player, Position(number, letters)))
            stage = _Stage.PLAYER
            letters, weight = 0, 1
            i += 1
            continue
        raise SerializationError(f"unexpected {char!r} in moves at offset {i}")
    return game