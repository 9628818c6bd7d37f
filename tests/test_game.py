import random

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from game import (
    BLUE, EMPTY, RED, GameState, HexBoard, HexGraph, Move, Turn, other, parse_move,
)


def random_fill(board: HexBoard, seed: int) -> HexBoard:
    """Fill the board with alternating random legal moves, blue first."""
    rnd = random.Random(seed)
    cells = board.empty_cells()
    rnd.shuffle(cells)
    color = BLUE
    for mv in cells:
        board.apply_move(mv, color)
        color = other(color)
    return board


# ---------------- HexGraph ----------------
def test_neighbors_of_interior_cell_follow_offsets():
    g = HexGraph(3, RED)
    assert g.neighbors(Move(1, 1), RED) == [
        Move(1, 0), Move(1, 2), Move(2, 0), Move(2, 1), Move(0, 1), Move(0, 2),
    ]


def test_neighbors_clip_to_bounds_and_filter_color():
    g = HexGraph(3)
    g.set(Move(0, 1), RED).set(Move(1, 0), BLUE)
    assert g.neighbors(Move(0, 0), RED) == [Move(0, 1)]
    assert g.neighbors(Move(0, 0), BLUE) == [Move(1, 0)]
    assert g.neighbors(Move(2, 2), EMPTY) == [Move(2, 1), Move(1, 2)]


def test_is_connected_requires_source_color_even_for_same_cell():
    g = HexGraph(3)
    assert not g.is_connected(Move(1, 1), Move(1, 1), RED)
    g.set(Move(1, 1), RED)
    assert g.is_connected(Move(1, 1), Move(1, 1), RED)


def test_is_connected_false_when_destination_other_color():
    g = HexGraph(3)
    g.set(Move(0, 0), RED).set(Move(0, 1), BLUE)
    assert not g.is_connected(Move(0, 0), Move(0, 1), RED)


def test_diagonal_across_the_short_axis_is_not_adjacent():
    # (0,0) and (1,1) are not neighbours on a hex grid
    g = HexGraph(3)
    g.set(Move(0, 0), RED).set(Move(1, 1), RED)
    assert not g.is_connected(Move(0, 0), Move(1, 1), RED)
    g.set(Move(0, 1), RED)
    assert g.is_connected(Move(0, 0), Move(1, 1), RED)


def test_has_any():
    g = HexGraph(3)
    assert g.has_any(EMPTY)
    assert not g.has_any(RED)
    for i in range(9):
        g.nodes[i] = BLUE
    assert not g.has_any(EMPTY)
    assert g.has_any(BLUE)


def test_copy_does_not_alias_cells():
    g = HexGraph(4)
    h = g.copy()
    h.set(Move(2, 2), RED)
    assert g.get(Move(2, 2)) == EMPTY
    assert h.adj is g.adj


boards = st.integers(min_value=3, max_value=7).flatmap(
    lambda n: st.tuples(
        st.just(n),
        st.lists(st.sampled_from([EMPTY, RED, BLUE]), min_size=n * n, max_size=n * n),
    )
)


@given(boards, st.data())
@settings(max_examples=60, deadline=None)
def test_is_connected_false_whenever_source_is_not_the_color(board, data):
    n, cells = board
    g = HexGraph(n)
    g.nodes = list(cells)
    s = Move(data.draw(st.integers(0, n - 1)), data.draw(st.integers(0, n - 1)))
    d = Move(data.draw(st.integers(0, n - 1)), data.draw(st.integers(0, n - 1)))
    for color in (RED, BLUE):
        if g.get(s) != color:
            assert not g.is_connected(s, d, color)


@given(boards, st.data())
@settings(max_examples=60, deadline=None)
def test_connectivity_is_symmetric(board, data):
    n, cells = board
    g = HexGraph(n)
    g.nodes = list(cells)
    a = Move(data.draw(st.integers(0, n - 1)), data.draw(st.integers(0, n - 1)))
    b = Move(data.draw(st.integers(0, n - 1)), data.draw(st.integers(0, n - 1)))
    for color in (RED, BLUE):
        assert g.is_connected(a, b, color) == g.is_connected(b, a, color)


# ---------------- HexBoard ----------------
@pytest.mark.parametrize("n", range(3, 22))
def test_is_valid_move_in_bounds_and_empty(n):
    board = HexBoard(n)
    board.apply_move(Move(n // 2, n // 2), RED)
    for r in range(-1, n + 1):
        for c in range(-1, n + 1):
            expected = 0 <= r < n and 0 <= c < n and (r, c) != (n // 2, n // 2)
            assert board.is_valid_move(Move(r, c)) is expected


def test_last_index_is_rejected():
    board = HexBoard(5)
    assert not board.is_valid_move(Move(5, 0))
    assert not board.is_valid_move(Move(0, 5))


def test_red_wins_down_column(place):
    board = place(HexBoard(3), RED, (0, 0), (1, 0), (2, 0))
    assert board.check_win(RED)
    assert not board.check_win(BLUE)
    assert board.is_over()


def test_blue_wins_along_top_row(place):
    board = place(HexBoard(3), BLUE, (0, 0), (0, 1), (0, 2))
    assert board.check_win(BLUE)
    assert not board.check_win(RED)


def test_red_top_row_alone_does_not_win(place):
    board = place(HexBoard(3), RED, (0, 0), (0, 1), (0, 2))
    assert not board.check_win(RED)
    place(board, RED, (1, 1))
    assert not board.check_win(RED)
    place(board, RED, (2, 0))
    assert board.check_win(RED)


def test_red_wins_along_hex_diagonal(place):
    # (0,2) -> (1,1) -> (2,0) uses the (1,-1) offset
    board = place(HexBoard(3), RED, (0, 2), (1, 1), (2, 0))
    assert board.check_win(RED)


def test_check_win_for_empty_is_false():
    assert not HexBoard(3).check_win(EMPTY)


@given(st.integers(min_value=3, max_value=7), st.integers(min_value=0, max_value=2**32))
@settings(max_examples=80, deadline=None)
def test_full_board_has_exactly_one_winner(n, seed):
    board = random_fill(HexBoard(n), seed)
    assert not board.has_empty_cell()
    assert board.check_win(RED) != board.check_win(BLUE)


def test_has_empty_cell_false_iff_full(place):
    board = HexBoard(3)
    cells = [(r, c) for r in range(3) for c in range(3)]
    for i, cell in enumerate(cells):
        assert board.has_empty_cell()
        place(board, RED if i % 2 else BLUE, cell)
    assert not board.has_empty_cell()


def test_switch_turn_returns_new_active_player(make_board):
    board = make_board(3)
    blue, red = board.players
    assert board.turn is Turn.FIRST
    assert board.active_player is blue
    assert board.switch_turn() is red
    assert board.turn is Turn.SECOND
    assert board.switch_turn() is blue


def test_active_player_needs_registered_players():
    with pytest.raises(RuntimeError):
        HexBoard(3).active_player


def test_play_runs_state_machine(make_board):
    board = make_board(3)
    assert board.state is GameState.IN_PROGRESS

    for mv in [Move(1, 0), Move(0, 0), Move(1, 1), Move(0, 1)]:
        assert board.play(mv)
        assert board.state is GameState.IN_PROGRESS

    assert not board.play(Move(0, 0))  # occupied
    assert not board.play(Move(3, 0))  # off the board
    assert board.moves_played == 4

    assert board.play(Move(1, 2))
    assert board.state is GameState.BLUE_WON
    assert board.winner == BLUE
    assert board.active_color == BLUE
    assert board.last_move == Move(1, 2)

    # terminal: nothing more is applied
    assert not board.play(Move(2, 2))
    assert board.get_cell_value(2, 2) == EMPTY


def test_clone_is_independent(make_board):
    board = make_board(4)
    board.play(Move(0, 0))
    copy = board.clone()
    copy.apply_move(Move(3, 3), RED)
    copy.switch_turn()

    assert board.get_cell_value(3, 3) == EMPTY
    assert copy.get_cell_value(0, 0) == BLUE
    assert board.turn is Turn.SECOND
    assert copy.turn is Turn.FIRST
    assert copy.players == board.players


def test_empty_cells_row_major(place):
    board = place(HexBoard(3), RED, (0, 1), (2, 2))
    assert board.empty_cells() == [
        Move(0, 0), Move(0, 2), Move(1, 0), Move(1, 1), Move(1, 2), Move(2, 0), Move(2, 1),
    ]


def test_text_rendering(place):
    board = place(HexBoard(3), RED, (0, 0))
    place(board, BLUE, (2, 2))
    lines = str(board).splitlines()
    assert len(lines) == 2 * 3 + 1
    assert lines[0].split() == ["a", "b", "c"]
    assert lines[1].split() == ["1", "X", "-", ".", "-", ".", "1"]
    assert lines[-2].split() == ["3", ".", "-", ".", "-", "O", "3"]
    assert lines[-1].split() == ["a", "b", "c"]
    # each row sits one half-cell further right than the one above
    assert lines[3].index("2") == lines[1].index("1") + 2


# ---------------- misc ----------------
@pytest.mark.parametrize("text,expected", [
    ("a1", Move(0, 0)),
    ("c2", Move(1, 2)),
    (" B11 ", Move(10, 1)),
    ("a0", Move(-1, 0)),
])
def test_parse_move(text, expected):
    assert parse_move(text) == expected


@pytest.mark.parametrize("text", ["", "a", "1a", "aa", "a-1", "?3"])
def test_parse_move_rejects_malformed(text):
    assert parse_move(text) is None


def test_move_str_round_trips_through_parse():
    assert str(Move(4, 2)) == "c5"
    assert parse_move(str(Move(4, 2))) == Move(4, 2)


def test_other():
    assert other(RED) == BLUE
    assert other(BLUE) == RED
