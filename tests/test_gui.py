import random

import pytest

from twixtai.board import Outcome, Player, Position
from twixtai.gui import (
    BOARD_SIZE,
    BORDER_OFFSET,
    CELL_SIZE,
    PEG_RADIUS,
    GameOver,
    GameSession,
    peg_at,
)


def _centre(index):
    return (index + BORDER_OFFSET) * CELL_SIZE


def _session(size=5):
    return GameSession(size=size, steps=1, threads=1, rng=random.Random(0))


@pytest.mark.parametrize("i, j", [(0, 0), (3, 7), (BOARD_SIZE - 1, BOARD_SIZE - 1)])
def test_peg_at_hole_centre(i, j):
    assert peg_at(_centre(i), _centre(j)) == Position(i, j)


def test_peg_at_radius_is_inclusive():
    assert peg_at(_centre(2) + PEG_RADIUS, _centre(4)) == Position(2, 4)
    assert peg_at(_centre(2) + PEG_RADIUS + 1, _centre(4)) is None


def test_peg_at_outside_board():
    assert peg_at(0, 0) is None
    assert peg_at(_centre(BOARD_SIZE), _centre(0)) is None


def test_peg_at_truncates_coordinates():
    assert peg_at(_centre(1) + 0.9, _centre(1) - 0.2) == Position(1, 1)


def test_human_move_rejects_edge_column():
    session = _session()
    assert session.human_move(Position(0, 2)) is False
    assert session.board.placed_moves == 0


def test_human_move_is_answered_by_black():
    session = _session()
    assert session.human_move(Position(2, 2)) is True
    board = session.board
    assert board.placed_moves == 2
    assert board.peek(Position(2, 2)).player is Player.RED
    black = [node for node in board.nodes if node.player is Player.BLACK]
    assert len(black) == 1


def test_ai_move_is_legal_for_black():
    session = _session()
    move = session.ai_move()
    assert session.board.peek(move).player is Player.BLACK
    assert move.y not in (0, session.board.size - 1)
    assert session.tree.move == move


def test_winning_move_raises_game_over():
    session = _session()
    assert session.board.play(Player.RED, Position(1, 0))
    assert session.board.play(Player.RED, Position(2, 2))
    with pytest.raises(GameOver) as info:
        session.human_move(Position(1, 4))
    assert info.value.outcome is Outcome.RED_WINS
    assert str(info.value) == "red"


def test_hover_links_finds_red_knight_neighbours():
    session = _session(size=6)
    assert session.board.play(Player.RED, Position(3, 4))
    assert session.board.play(Player.BLACK, Position(4, 3))
    assert session.hover_links(Position(2, 2)) == [Position(3, 4)]


def test_hover_links_without_neighbours_is_empty():
    session = _session(size=6)
    assert session.hover_links(Position(2, 2)) == []


def test_hover_links_none_on_edge_column():
    session = _session(size=6)
    assert session.hover_links(Position(0, 2)) is None
    assert session.hover_links(Position(5, 2)) is None


def test_hover_links_none_on_occupied_hole():
    session = _session(size=6)
    assert session.board.play(Player.RED, Position(2, 2))
    assert session.hover_links(Position(2, 2)) is None


def test_hover_links_none_outside_board():
    session = _session(size=6)
    assert session.hover_links(Position(9, 9)) is None