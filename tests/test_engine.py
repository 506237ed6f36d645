import random

import numpy as np
import pytest

from tetris_engine.game.engine import SCORE_TABLE, Action, GameEngine, GameStatus, Piece
from tetris_engine.game.pieces import I_SHAPE, O_SHAPE, SHAPES, T_SHAPE, rotate_clockwise
from tetris_engine.storage import MemoryHighScoreStore
from tests.conftest import fill_row

VERTICAL_I = rotate_clockwise(I_SHAPE)


def test_new_engine_is_ready(engine):
    assert engine.status is GameStatus.READY
    assert engine.active is None
    assert engine.preview is not None
    assert engine.score == 0
    assert not engine.game_over


class TestSpawn:
    def test_promotes_preview_centered_at_top(self, engine):
        preview = engine.preview
        piece = engine.spawn_piece()

        assert piece is engine.active
        assert np.array_equal(piece.shape, preview.shape)
        assert piece.x == 10 // 2 - preview.shape.shape[1] // 2
        assert piece.y == 0
        assert engine.preview is not preview
        assert engine.status is GameStatus.PLAYING

    def test_i_piece_spawn_column(self, engine):
        engine.preview = Piece(I_SHAPE)
        assert engine.spawn_piece().x == 3

    def test_blocked_spawn_ends_game(self, engine):
        fill_row(engine.board.grid, 0, except_cols=[0])
        preview = engine.preview

        assert engine.spawn_piece() is None
        assert engine.game_over
        assert engine.active is None
        assert engine.preview is preview

    def test_same_seed_same_pieces(self):
        a = GameEngine(rng=random.Random(99))
        b = GameEngine(rng=random.Random(99))
        for _ in range(10):
            assert np.array_equal(a.spawn_piece().shape, b.spawn_piece().shape)
            a.board.reset()
            b.board.reset()


class TestMove:
    def test_no_active_piece(self, engine):
        assert engine.move_piece(1, 0) is False

    def test_move_and_block_at_wall(self, engine):
        engine.active = Piece(O_SHAPE, 1, 5)
        engine.status = GameStatus.PLAYING

        assert engine.move_piece(-1, 0) is True
        assert engine.active.x == 0
        assert engine.move_piece(-1, 0) is False
        assert (engine.active.x, engine.active.y) == (0, 5)

    def test_active_piece_stays_in_bounds(self, engine):
        engine.start()
        for dx in (-1, 1):
            for _ in range(12):
                engine.move_piece(dx, 0)
                assert all(0 <= x < 10 for x, _ in engine.active.cells())

    def test_move_down_until_floor(self, engine):
        engine.active = Piece(O_SHAPE, 4, 0)
        engine.status = GameStatus.PLAYING
        moves = 0
        while engine.move_piece(0, 1):
            moves += 1
        assert moves == 18
        assert engine.active.y == 18


class TestRotate:
    def test_four_rotations_round_trip(self, engine):
        engine.active = Piece(T_SHAPE, 4, 5)
        engine.status = GameStatus.PLAYING
        for _ in range(4):
            assert engine.rotate_piece() is True
        assert np.array_equal(engine.active.shape, T_SHAPE)

    def test_rejected_rotation_keeps_shape(self, engine):
        engine.active = Piece(I_SHAPE, 3, 19)
        engine.status = GameStatus.PLAYING
        assert engine.rotate_piece() is False
        assert np.array_equal(engine.active.shape, I_SHAPE)
        assert (engine.active.x, engine.active.y) == (3, 19)

    def test_no_wall_kick(self, engine):
        engine.active = Piece(VERTICAL_I, 9, 5)
        engine.status = GameStatus.PLAYING
        assert engine.rotate_piece() is False
        assert engine.active.x == 9


class TestLock:
    def test_lock_writes_cells_and_spawns(self, engine):
        engine.active = Piece(O_SHAPE, 0, 18)
        engine.status = GameStatus.PLAYING

        assert engine.lock_piece() is True
        assert engine.board.grid[18:20, 0:2].all()
        assert engine.active is not None
        assert engine.active.y == 0

    def test_single_line_clear(self, engine, store):
        fill_row(engine.board.grid, 19, except_cols=[3, 4, 5, 6])
        engine.active = Piece(I_SHAPE, 3, 19)
        engine.status = GameStatus.PLAYING

        assert engine.lock_piece() is True
        assert engine.score == 100
        assert engine.board.occupied_count() == 0

    def test_four_line_clear(self, engine):
        for row in range(16, 20):
            fill_row(engine.board.grid, row, except_cols=[0])
        engine.active = Piece(VERTICAL_I, 0, 16)
        engine.status = GameStatus.PLAYING

        assert engine.lock_piece() is True
        assert engine.score == 800
        assert engine.board.occupied_count() == 0

    def test_lock_above_board_ends_game(self, engine):
        for row in range(20):
            fill_row(engine.board.grid, row, except_cols=[0])
        engine.active = Piece(VERTICAL_I, 0, -2)
        engine.status = GameStatus.PLAYING

        assert engine.lock_piece() is False
        assert engine.game_over
        # In-range blocks stay written, no lines are cleared
        assert engine.board.grid[0:2, 0].all()
        assert engine.score == 0

        before = engine.get_state()
        assert engine.move_piece(0, 1) is False
        after = engine.get_state()
        assert np.array_equal(before.board, after.board)
        assert before.active == after.active
        assert before.score == after.score


class TestGameOverIsTerminal:
    @pytest.fixture
    def over(self, engine):
        engine.start()
        engine.active = Piece(O_SHAPE, 4, -1)
        engine.lock_piece()
        assert engine.game_over
        return engine

    def test_operations_are_noops(self, over):
        grid = over.board.get_grid()
        assert over.move_piece(1, 0) is False
        assert over.rotate_piece() is False
        assert over.lock_piece() is False
        assert over.spawn_piece() is None
        assert over.tick() is False
        assert over.step(Action.LEFT) is False
        assert over.add_score(4) == 0
        assert over.clear_lines() == 0
        assert over.score == 0
        assert np.array_equal(over.board.grid, grid)

    def test_overflow_lock_leaves_full_rows_untouched(self, engine):
        for row in range(20):
            fill_row(engine.board.grid, row, except_cols=[0])
        engine.active = Piece(VERTICAL_I, 0, -2)
        engine.status = GameStatus.PLAYING
        assert engine.lock_piece() is False

        # Rows 0 and 1 are now complete but stay on the board
        grid = engine.board.get_grid()
        assert grid[0].all() and grid[1].all()

        assert engine.clear_lines() == 0
        assert engine.start() is None
        assert engine.tick() is False
        assert engine.lock_piece() is False
        assert engine.step(Action.DOWN) is False
        assert np.array_equal(engine.board.grid, grid)
        assert engine.board.occupied_count() == 182
        assert engine.score == 0
        assert engine.high_score == 0

    def test_reset_is_the_only_way_out(self, over):
        over.reset()
        assert over.status is GameStatus.READY
        assert over.board.occupied_count() == 0
        assert over.start() is not None

    def test_start_does_not_revive(self, over):
        assert over.start() is None
        assert over.game_over

    def test_final_score_captured(self, engine):
        engine.start()
        engine.add_score(2)
        engine.active = Piece(O_SHAPE, 4, -1)
        engine.lock_piece()
        assert engine.final_score == 300


class TestScoring:
    @pytest.mark.parametrize("lines, points", [(0, 0), (1, 100), (2, 300), (3, 500), (4, 800), (5, 0)])
    def test_score_table(self, engine, lines, points):
        assert engine.add_score(lines) == points
        assert engine.score == points

    def test_table_constants(self):
        assert SCORE_TABLE == {1: 100, 2: 300, 3: 500, 4: 800}

    def test_clear_lines_scores_once_per_event(self, engine):
        fill_row(engine.board.grid, 18)
        fill_row(engine.board.grid, 19)
        assert engine.clear_lines() == 2
        assert engine.score == 300


class TestHighScore:
    def test_loaded_from_store(self):
        engine = GameEngine(store=MemoryHighScoreStore(500))
        assert engine.high_score == 500

    def test_writes_once_per_increase(self):
        store = MemoryHighScoreStore(500)
        engine = GameEngine(store=store)

        engine.add_score(1)
        engine.add_score(2)
        engine.add_score(1)
        assert engine.score == 500
        assert engine.high_score == 500
        assert store.writes == 0

        engine.add_score(1)
        assert engine.high_score == 600
        assert store.writes == 1
        assert store.value == 600

        engine.add_score(2)
        assert engine.high_score == 900
        assert store.writes == 2

    def test_missing_value_defaults_to_zero(self):
        assert GameEngine(store=MemoryHighScoreStore()).high_score == 0

    @pytest.mark.parametrize("stored, expected", [("3.7", 3), ("1e3", 1000), (450.0, 450), ("-20", 0)])
    def test_numeric_strings_are_read(self, stored, expected):
        assert GameEngine(store=MemoryHighScoreStore(stored)).high_score == expected

    def test_infinite_value_defaults_to_zero(self):
        assert GameEngine(store=MemoryHighScoreStore("inf")).high_score == 0

    def test_unparseable_value_defaults_to_zero(self):
        assert GameEngine(store=MemoryHighScoreStore("abc")).high_score == 0

    def test_store_failures_are_not_fatal(self):
        class BrokenStore:
            def load(self):
                raise OSError("unavailable")

            def save(self, value):
                raise OSError("unavailable")

        engine = GameEngine(store=BrokenStore())
        assert engine.high_score == 0
        assert engine.add_score(1) == 100
        assert engine.high_score == 100

    def test_reset_keeps_high_score(self, engine):
        engine.start()
        engine.add_score(4)
        engine.reset()
        assert engine.score == 0
        assert engine.high_score == 800
        assert engine.status is GameStatus.READY
        assert engine.board.occupied_count() == 0


class TestTickAndStep:
    def test_first_tick_spawns(self, engine):
        assert engine.tick() is True
        assert engine.status is GameStatus.PLAYING
        assert engine.active.y == 0

    def test_tick_applies_gravity(self, engine):
        engine.start()
        assert engine.tick() is True
        assert engine.active.y == 1

    def test_tick_locks_when_blocked(self, engine):
        engine.start()
        engine.active = Piece(O_SHAPE, 0, 18)
        engine.tick()
        assert engine.board.grid[18:20, 0:2].all()
        assert engine.active.y == 0

    def test_step_dispatch(self, engine):
        engine.active = Piece(T_SHAPE, 4, 5)
        engine.status = GameStatus.PLAYING
        assert engine.step(Action.LEFT) and engine.active.x == 3
        assert engine.step(Action.RIGHT) and engine.active.x == 4
        assert engine.step(Action.DOWN) and engine.active.y == 6
        assert engine.step(Action.ROTATE)
        assert engine.active.shape.shape == (3, 2)

    def test_run_until_game_over(self, engine):
        # Pieces pile up in the middle column and eventually block the spawn
        for _ in range(2000):
            if not engine.tick():
                break
        assert engine.game_over
        assert engine.active is None


def test_state_snapshot_is_detached(engine):
    engine.start()
    state = engine.get_state()
    engine.move_piece(0, 1)
    engine.board.grid[19, 0] = True

    assert state.active.y == 0
    assert not state.board[19, 0]
    assert state.preview.shape.shape in {s.shape for s in SHAPES}
    assert state.status is GameStatus.PLAYING
