import struct

import pytest

from twixtai.board import Board, Player, Position
from twixtai.pcg import Pcg64
from twixtai.serializer import Game, Move, MoveType
from twixtai.zobrist import (
    Observation,
    Zobrist,
    bitstring_index,
    make_bitstrings,
    neighbourhood_hash,
    position_index,
    positions_for_zoom,
)


def _offsets(zoom):
    return [
        (dx, dy)
        for dx in range(-zoom, zoom + 1)
        for dy in range(-zoom, zoom + 1)
        if abs(dx) + abs(dy) <= zoom
    ]


def test_centre_has_index_zero():
    assert position_index(0, 0) == 0


@pytest.mark.parametrize("zoom", [1, 2, 3, 4])
def test_position_index_is_a_bijection_onto_range(zoom):
    indices = {position_index(dx, dy) for dx, dy in _offsets(zoom)}
    assert indices == set(range(positions_for_zoom(zoom + 1)))


def test_positions_for_zoom_rejects_zero():
    with pytest.raises(ValueError):
        positions_for_zoom(0)


def test_bitstring_index_rejects_empty_player():
    with pytest.raises(ValueError):
        bitstring_index(0, 0, Player.NONE, 0)


def test_bitstring_index_rejects_large_links():
    with pytest.raises(ValueError):
        bitstring_index(0, 0, Player.RED, 256)


def test_bitstring_indices_are_distinct_and_in_range():
    bitstrings = make_bitstrings(1)
    indices = [
        bitstring_index(dx, dy, player, links)
        for dx, dy in _offsets(1)
        for player in (Player.RED, Player.BLACK)
        for links in (0, 1, 128, 255)
    ]
    assert len(set(indices)) == len(indices)
    assert max(indices) < len(bitstrings)
    assert min(indices) >= 0


def test_bitstrings_come_from_seeded_generator():
    rng = Pcg64.seeded(1)
    expected = [rng.pull() for _ in range(5)]
    assert list(make_bitstrings(1)[:5]) == expected


def test_bitstrings_share_prefix_across_zooms():
    small, large = make_bitstrings(1), make_bitstrings(2)
    assert len(large) > len(small)
    assert large[: len(small)] == small


def test_hash_of_empty_neighbourhood_is_zero():
    board = Board(6)
    assert neighbourhood_hash(Position(2, 2), board, 2, make_bitstrings(2)) == 0


def test_hash_of_single_peg_is_its_bitstring():
    board = Board(6)
    assert board.play(Player.RED, Position(3, 2))
    bitstrings = make_bitstrings(1)
    node = board.peek(Position(3, 2))
    expected = bitstrings[bitstring_index(1, 0, Player.RED, node.links)]
    assert neighbourhood_hash(Position(2, 2), board, 1, bitstrings) == expected


def test_hash_ignores_pegs_beyond_zoom():
    board = Board(8)
    assert board.play(Player.RED, Position(5, 5))
    assert neighbourhood_hash(Position(2, 2), board, 1, make_bitstrings(1)) == 0


def test_hash_depends_on_player():
    red_board, black_board = Board(6), Board(6)
    assert red_board.play(Player.RED, Position(2, 2))
    assert black_board.play(Player.BLACK, Position(2, 2))
    bitstrings = make_bitstrings(1)
    red = neighbourhood_hash(Position(2, 2), red_board, 1, bitstrings)
    black = neighbourhood_hash(Position(2, 2), black_board, 1, bitstrings)
    assert red != black and red != 0 and black != 0


@pytest.mark.parametrize("table_size, zoom_count", [(0, 1), (4, 0), (4, 256)])
def test_invalid_dimensions(table_size, zoom_count):
    with pytest.raises(ValueError):
        Zobrist(table_size, zoom_count)


def test_evaluate_without_observations_raises():
    zobrist = Zobrist(16, 2)
    with pytest.raises(LookupError):
        zobrist.evaluate(Position(2, 2), Player.RED, Board(6))


def test_evaluate_rejects_empty_player():
    zobrist = Zobrist(16, 1)
    with pytest.raises(ValueError):
        zobrist.evaluate(Position(2, 2), Player.NONE, Board(6))


def _paired_game():
    return Game(
        size=6,
        moves=[
            Move(MoveType.PEG, Player.RED, Position(2, 1)),
            Move(MoveType.PEG, Player.BLACK, Position(1, 2)),
        ],
    )


def _board_after_first_move():
    board = Board(6)
    assert board.play(Player.RED, Position(2, 1))
    return board


def test_populate_then_evaluate():
    zobrist = Zobrist(16, 2)
    zobrist.populate(_paired_game())
    board = _board_after_first_move()
    assert zobrist.evaluate(Position(2, 1), Player.BLACK, board) == 1.0
    with pytest.raises(LookupError):
        zobrist.evaluate(Position(2, 1), Player.RED, board)


def test_populate_counts_once_per_zoom():
    zobrist = Zobrist(16, 2)
    zobrist.populate(_paired_game())
    for table in zobrist.observations:
        assert sum(obs.black_visited for obs in table) == 1
        assert sum(obs.black_chosen for obs in table) == 1
        assert sum(obs.red_visited + obs.red_chosen for obs in table) == 0


def test_populate_skips_unpaired_moves():
    zobrist = Zobrist(8, 1)
    game = Game(
        size=6,
        moves=[
            Move(MoveType.PEG, Player.RED, Position(2, 1)),
            Move(MoveType.RESIGN, Player.BLACK),
        ],
    )
    zobrist.populate(game)
    assert all(obs == Observation() for obs in zobrist.observations[0])


def test_bytes_round_trip():
    zobrist = Zobrist(16, 2)
    zobrist.populate(_paired_game())
    restored = Zobrist.from_bytes(zobrist.to_bytes())
    assert restored.observations == zobrist.observations
    assert restored.evaluate(Position(2, 1), Player.BLACK, _board_after_first_move()) == 1.0


def test_bytes_header_and_terminator():
    data = Zobrist(16, 2).to_bytes()
    assert struct.unpack_from("<QB", data) == (16, 2)
    assert data[-1] == 0


def test_from_bytes_rejects_truncated_data():
    data = Zobrist(4, 1).to_bytes()
    with pytest.raises(ValueError):
        Zobrist.from_bytes(data[:-2])


def test_from_bytes_rejects_missing_terminator():
    data = bytearray(Zobrist(4, 1).to_bytes())
    data[-1] = 7
    with pytest.raises(ValueError):
        Zobrist.from_bytes(bytes(data))


def test_observation_ratio():
    obs = Observation(black_visited=4, black_chosen=1)
    assert obs.ratio(Player.BLACK) == 0.25
    assert obs.ratio(Player.RED) is None