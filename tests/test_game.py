import io
import random
from unittest.mock import patch

import pytest

from funnygame.engine import Board, Color, Pixel, Terminal, dist
from funnygame.game import (
    BACKGROUND,
    Apple,
    AppleManager,
    Effect,
    Player,
    apple_effect,
    convert_to_wasd,
    display_header,
    display_main_menu,
    format_score_line,
    format_time_line,
    main,
    play_round,
)

FACE = Pixel("P", Color.LIGHT_GREEN, Color.LIGHT_GREEN)


def make_board(size=15, inp=""):
    terminal = Terminal(out=io.StringIO(), inp=io.StringIO(inp))
    return terminal, Board(size, size, BACKGROUND, terminal)


def test_apple_faces_match_kinds():
    assert Apple(0, 0, "g").face == Pixel("g", Color.LIGHT_BLUE, Color.LIGHT_BLUE)
    assert Apple(0, 0, "b").face == Pixel("b", Color.LIGHT_RED, Color.LIGHT_RED)
    assert Apple(1, 2, "m").face.bgc == Color.GRAY
    assert Apple(1, 2, "t").face.fgc == Color.MAGENTA


def test_apple_rejects_unknown_kind():
    with pytest.raises(ValueError):
        Apple(0, 0, "x")


def test_player_move_clamps_at_edges():
    _, board = make_board()
    player = Player(board, 0, 0, FACE)
    player.move("w")
    player.move("a")
    assert (player.row, player.col) == (0, 0)
    player.move("s")
    assert (player.row, player.col) == (1, 0)
    assert board.pixel_at(0, 0) == BACKGROUND
    assert board.pixel_at(1, 0) == FACE


def test_player_move_clamps_bottom_right():
    _, board = make_board(size=4)
    player = Player(board, 3, 3, FACE)
    player.move("s")
    player.move("d")
    assert (player.row, player.col) == (3, 3)
    player.move("x")
    assert (player.row, player.col) == (3, 3)
    assert board.pixel_at(3, 3) == FACE


def test_spawn_keeps_distance_and_avoids_overlap():
    _, board = make_board()
    player = Player(board, 7, 7, FACE)
    manager = AppleManager(board, random.Random(3))
    spawned = [manager.spawn(player, "b") for _ in range(30)]
    positions = {(a.row, a.col) for a in spawned}
    assert len(positions) == 30
    for apple in spawned:
        assert dist(player.col, player.row, apple.col, apple.row) > 2.5
        assert manager.on_apple(apple.row, apple.col)
        assert board.pixel_at(apple.row, apple.col) == apple.face


def test_spawn_without_room_raises():
    _, board = make_board(size=3)
    player = Player(board, 1, 1, FACE)
    manager = AppleManager(board, random.Random(0))
    with pytest.raises(ValueError):
        manager.spawn(player, "g")


def test_remove_pop_and_clear():
    _, board = make_board()
    player = Player(board, 7, 7, FACE)
    manager = AppleManager(board, random.Random(5))
    first = manager.spawn(player, "g")
    second = manager.spawn(player, "b")
    third = manager.spawn(player, "s")

    assert manager.pop() == third
    assert board.pixel_at(third.row, third.col) == BACKGROUND

    manager.remove(first)
    assert manager.apples == [second]
    assert board.pixel_at(first.row, first.col) == BACKGROUND

    manager.clear()
    assert manager.apples == []
    assert board.pixel_at(second.row, second.col) == BACKGROUND


def test_pop_empty_raises():
    _, board = make_board()
    with pytest.raises(IndexError):
        AppleManager(board).pop()


def test_apple_at_finds_and_rejects():
    _, board = make_board()
    player = Player(board, 7, 7, FACE)
    manager = AppleManager(board, random.Random(9))
    apple = manager.spawn(player, "t")
    assert manager.apple_at(apple.row, apple.col) == apple
    with pytest.raises(ValueError, match="invalid apple coordinates"):
        manager.apple_at(player.row, player.col)


@pytest.mark.parametrize("seed", range(8))
def test_respawn_replaces_all_apples(seed):
    _, board = make_board()
    player = Player(board, 7, 7, FACE)
    manager = AppleManager(board, random.Random(seed))
    old = manager.spawn(player, "b")
    manager.respawn(player)
    kinds = [a.kind for a in manager.apples]
    assert kinds.count("g") == 1
    assert 4 <= kinds.count("b") <= 6
    for special in "smt":
        assert kinds.count(special) <= 1
    if not manager.on_apple(old.row, old.col):
        assert board.pixel_at(old.row, old.col) == BACKGROUND


def test_apple_effects():
    assert apple_effect("g") == Effect(1, 500)
    assert apple_effect("b") == Effect(-1, -500)
    assert apple_effect("s") == Effect(5, 2500)
    assert apple_effect("t") == Effect(0, 0, 5000)


def test_mystery_effect_is_one_of_two():
    rng = random.Random(1)
    seen = {apple_effect("m", rng) for _ in range(50)}
    assert seen == {Effect(5, 2500), Effect(-3, -1500)}


def test_unknown_effect_raises():
    with pytest.raises(ValueError):
        apple_effect("z")


def test_convert_to_wasd():
    assert convert_to_wasd("A") == "w"
    assert convert_to_wasd("B") == "s"
    assert convert_to_wasd("C") == "d"
    assert convert_to_wasd("D") == "a"
    assert convert_to_wasd("x") == "x"
    assert convert_to_wasd(None) is None


def test_format_lines():
    assert format_score_line(7, 0) == "Score:   7      Last Collected"
    assert format_score_line(3, -1) == "Score:   3   -1"
    assert format_time_line(15000, 0).startswith("Time: 15.0")
    assert format_time_line(15000, 500).endswith("+0.5")


def test_display_header_writes_both_lines():
    out = io.StringIO()
    display_header(Terminal(out=out), 4, 0, 12000, 0)
    text = out.getvalue()
    assert format_score_line(4, 0) in text
    assert format_time_line(12000, 0) in text
    assert text.endswith("\033[0m")


def test_display_main_menu_lists_apples():
    out = io.StringIO()
    display_main_menu(Terminal(out=out))
    text = out.getvalue()
    for label in ("good apple", "bad apple", "special apple",
                  "time apple", "mystery apple", "press enter to play"):
        assert label in text


@patch("time.sleep")
def test_play_round_runs_out_of_time(_sleep):
    terminal, board = make_board(inp="\nd")
    score, spent = play_round(terminal, board, random.Random(2))
    text = terminal.out.getvalue()
    assert score < 100
    assert "GAME OVER" in text
    assert "You got" in text
    assert spent > 0
    assert board.pixel_at(7, 8) == BACKGROUND


@patch("time.sleep")
def test_play_round_eof_before_enter(_sleep):
    terminal, board = make_board(inp="")
    with pytest.raises(EOFError):
        play_round(terminal, board, random.Random(0))


@patch("time.sleep")
def test_play_round_eof_while_paused(_sleep):
    terminal, board = make_board(inp="\ndp")
    with pytest.raises(EOFError):
        play_round(terminal, board, random.Random(0))


def test_main_exits_cleanly_on_end_of_input():
    out = io.StringIO()
    with patch("sys.stdin", io.StringIO("")), patch("sys.stdout", out):
        assert main([]) == 0
    assert "Exiting game..." in out.getvalue()