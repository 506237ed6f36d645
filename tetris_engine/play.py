"""
Manual play and headless simulation.

Provides two modes:
  - play_manual: Human plays with keyboard controls in a pygame window.
  - simulate: Random inputs plus gravity ticks, no window; returns a summary.

Both build the engine the same way from the config dict.
"""

from __future__ import annotations

import logging
import random
from typing import Any

try:
    import pygame
except ImportError:
    pygame = None  # type: ignore[assignment]

from tetris_engine.game.engine import Action, GameEngine
from tetris_engine.scheduler import DEFAULT_DROP_INTERVAL_MS, GravityTimer
from tetris_engine.storage import HighScoreStore, YamlHighScoreStore

logger = logging.getLogger(__name__)


# ── Keyboard mapping for manual play ─────────────────────────────────────
KEY_MAP: dict[int, Action] = {}
if pygame is not None:
    KEY_MAP = {
        pygame.K_LEFT: Action.LEFT,
        pygame.K_RIGHT: Action.RIGHT,
        pygame.K_DOWN: Action.DOWN,
        pygame.K_UP: Action.ROTATE,
    }


def build_engine(config: dict[str, Any], store: HighScoreStore | None = None) -> GameEngine:
    """Create a GameEngine from a config dict.

    Args:
        config: Config dict from load_config().
        store: High-score store; defaults to a YAML file at
            config['high_score_path'].
    """
    if store is None:
        store = YamlHighScoreStore(config.get("high_score_path", "~/.tetris_engine/highscore.yaml"))
    seed = config.get("seed")
    rng = random.Random(seed) if seed is not None else None
    return GameEngine(
        board_width=config.get("board_width", 10),
        board_height=config.get("board_height", 20),
        store=store,
        rng=rng,
    )


def dispatch_key(engine: GameEngine, key: int) -> bool:
    """Forward a key press to the engine if it maps to an action.

    Returns:
        True if the engine state changed.
    """
    if engine.game_over:
        return False
    action = KEY_MAP.get(key)
    if action is None:
        return False
    return engine.step(action)


def play_manual(config: dict[str, Any]) -> None:
    """Run the game in manual (human) play mode.

    Controls:
      - Left/Right arrow: move piece
      - Down arrow: move down one row
      - Up arrow: rotate clockwise
      - R (after game over): restart
      - Escape / close window: quit

    Args:
        config: Config dict from load_config().
    """
    if pygame is None:
        raise ImportError("pygame is required for play mode. Install it: pip install pygame")

    from tetris_engine.renderer import TetrisRenderer

    fps = config.get("fps", 60)
    engine = build_engine(config)
    renderer = TetrisRenderer(
        engine.board.width,
        engine.board.height,
        cell_size=config.get("cell_size", 30),
        preview_cell_size=config.get("preview_cell_size", 25),
    )
    # Opens the window so pygame.event.get() and get_ticks() are usable
    renderer.render(engine.get_state(), fps)

    timer = GravityTimer(engine, config.get("drop_interval_ms", DEFAULT_DROP_INTERVAL_MS))
    engine.start()
    timer.start(pygame.time.get_ticks())

    running = True
    while running:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
                break
            if event.type != pygame.KEYDOWN:
                continue
            if event.key == pygame.K_ESCAPE:
                running = False
                break
            if engine.game_over:
                if event.key == pygame.K_r:
                    engine.reset()
                    engine.start()
                    timer.start(pygame.time.get_ticks())
                continue
            dispatch_key(engine, event.key)

        if not running:
            break

        timer.update(pygame.time.get_ticks())
        renderer.render(engine.get_state(), fps)

    logger.info("Quit with score %d (high score %d)", engine.score, engine.high_score)
    renderer.close()


def simulate(
    config: dict[str, Any],
    max_ticks: int = 10_000,
    inputs_per_tick: int = 2,
    store: HighScoreStore | None = None,
) -> dict[str, Any]:
    """Play one game headlessly with uniformly random inputs.

    Each gravity tick is preceded by `inputs_per_tick` random actions, the
    same interleaving a human produces between timer callbacks.

    Args:
        config: Config dict from load_config().
        max_ticks: Stop after this many gravity ticks even if still playing.
        inputs_per_tick: Random actions attempted before every tick.
        store: Optional high-score store (see build_engine).

    Returns:
        Dict with score, high_score, ticks, and game_over.
    """
    engine = build_engine(config, store=store)
    # Own stream so inputs do not shift the piece sequence for a given seed
    input_rng = random.Random(config.get("seed"))
    actions = list(Action)

    engine.start()
    ticks = 0
    while ticks < max_ticks and not engine.game_over:
        for _ in range(inputs_per_tick):
            engine.step(input_rng.choice(actions))
        engine.tick()
        ticks += 1

    summary = {
        "score": engine.score,
        "high_score": engine.high_score,
        "ticks": ticks,
        "game_over": engine.game_over,
    }
    logger.info("Simulation finished: %s", summary)
    return summary
