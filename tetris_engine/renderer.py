"""
Pygame renderer for the game engine.

Draws the board grid, active piece, next piece preview, and a sidebar with
score and high score. The renderer only reads GameState snapshots; it never
touches the engine itself.
"""

from __future__ import annotations

try:
    import pygame
except ImportError:
    pygame = None  # type: ignore[assignment]

from tetris_engine.game.engine import GameState, Piece


# ── Color constants ───────────────────────────────────────────────────────
BACKGROUND_COLOR = (255, 255, 255)
GRID_LINE_COLOR = (225, 225, 225)
BORDER_COLOR = (60, 60, 60)
TEXT_COLOR = (20, 20, 20)
SIDEBAR_BG_COLOR = (240, 240, 240)
LOCKED_CELL_COLOR = (0, 0, 0)
ACTIVE_CELL_COLOR = (255, 0, 0)


class TetrisRenderer:
    """Pygame-based renderer for GameState snapshots.

    The window is divided into:
      - Left: board area (cell_size * width) x (cell_size * height)
      - Right: sidebar with next piece, score, high score

    Attributes:
        board_width: Board width in cells.
        board_height: Board height in cells.
        cell_size: Pixel size of each board cell.
        preview_cell_size: Pixel size of each cell in the NEXT preview.
        board_pixel_width: Pixel width of the board area.
        board_pixel_height: Pixel height of the board area.
        screen: Pygame display surface (created on first render).
    """

    SIDEBAR_WIDTH_CELLS: int = 6

    def __init__(
        self,
        board_width: int = 10,
        board_height: int = 20,
        cell_size: int = 30,
        preview_cell_size: int = 25,
    ) -> None:
        """Initialize the renderer.

        Does NOT create the Pygame window yet; that happens on the first
        call to render().
        """
        if pygame is None:
            raise ImportError("pygame is required for rendering. Install it: pip install pygame")

        self.board_width = board_width
        self.board_height = board_height
        self.cell_size = cell_size
        self.preview_cell_size = preview_cell_size

        self.board_pixel_width = cell_size * board_width
        self.board_pixel_height = cell_size * board_height
        self.sidebar_width = cell_size * self.SIDEBAR_WIDTH_CELLS
        self.window_width = self.board_pixel_width + self.sidebar_width
        self.window_height = self.board_pixel_height

        self.screen: pygame.Surface | None = None
        self._clock: pygame.time.Clock | None = None
        self._font: pygame.font.Font | None = None
        self._large_font: pygame.font.Font | None = None
        self._initialized: bool = False

    def render(self, state: GameState, fps: int = 60) -> None:
        """Draw a game state to the screen.

        Args:
            state: Snapshot from GameEngine.get_state().
            fps: Target frames per second for the display clock.
        """
        if not self._initialized:
            self._init_pygame()

        self.screen.fill(BACKGROUND_COLOR)
        self._draw_board(state)
        if state.active is not None and not state.game_over:
            self._draw_active_piece(state.active)
        self._draw_sidebar(state)

        pygame.draw.rect(
            self.screen,
            BORDER_COLOR,
            (0, 0, self.board_pixel_width, self.board_pixel_height),
            2,
        )
        if state.game_over:
            self._draw_game_over(state)

        pygame.display.flip()
        self._clock.tick(fps)

    def _init_pygame(self) -> None:
        pygame.init()
        self.screen = pygame.display.set_mode((self.window_width, self.window_height))
        pygame.display.set_caption("Tetris")
        self._clock = pygame.time.Clock()
        self._font = pygame.font.SysFont("monospace", 20)
        self._large_font = pygame.font.SysFont("monospace", 32, bold=True)
        self._initialized = True

    def _draw_cell(self, x: int, y: int, size: int, color: tuple[int, int, int]) -> None:
        # One pixel gap between cells
        pygame.draw.rect(self.screen, color, (x, y, size - 1, size - 1))

    def _draw_board(self, state: GameState) -> None:
        """Draw grid lines and every locked cell."""
        for row in range(self.board_height):
            for col in range(self.board_width):
                x = col * self.cell_size
                y = row * self.cell_size
                if state.board[row, col]:
                    self._draw_cell(x, y, self.cell_size, LOCKED_CELL_COLOR)
                else:
                    pygame.draw.rect(
                        self.screen, GRID_LINE_COLOR, (x, y, self.cell_size, self.cell_size), 1
                    )

    def _draw_active_piece(self, piece: Piece) -> None:
        """Draw the falling piece; cells above the board are not drawn."""
        for board_col, board_row in piece.cells():
            if 0 <= board_row < self.board_height and 0 <= board_col < self.board_width:
                self._draw_cell(
                    board_col * self.cell_size,
                    board_row * self.cell_size,
                    self.cell_size,
                    ACTIVE_CELL_COLOR,
                )

    def _draw_sidebar(self, state: GameState) -> None:
        """Draw the sidebar with next piece, score, and high score."""
        sidebar_x = self.board_pixel_width
        pygame.draw.rect(
            self.screen,
            SIDEBAR_BG_COLOR,
            (sidebar_x, 0, self.sidebar_width, self.window_height),
        )

        margin = 15
        text_x = sidebar_x + margin
        self._draw_preview(state.preview, text_x, 20)

        text_y = 200
        self._draw_text("SCORE", text_x, text_y)
        self._draw_text(str(state.score), text_x, text_y + 25)

        text_y += 65
        self._draw_text("HIGH SCORE", text_x, text_y)
        self._draw_text(str(state.high_score), text_x, text_y + 25)

    def _draw_preview(self, piece: Piece, x_offset: int, y_offset: int) -> None:
        """Draw the next piece centered in a preview box."""
        cell = self.preview_cell_size
        box_size = cell * 5

        self._draw_text("NEXT", x_offset, y_offset)
        box_y = y_offset + 25
        pygame.draw.rect(self.screen, BACKGROUND_COLOR, (x_offset, box_y, box_size, box_size))
        pygame.draw.rect(self.screen, BORDER_COLOR, (x_offset, box_y, box_size, box_size), 1)

        rows, cols = piece.shape.shape
        offset_x = x_offset + (box_size - cols * cell) // 2
        offset_y = box_y + (box_size - rows * cell) // 2
        for r in range(rows):
            for c in range(cols):
                if piece.shape[r, c]:
                    self._draw_cell(offset_x + c * cell, offset_y + r * cell, cell, ACTIVE_CELL_COLOR)

    def _draw_game_over(self, state: GameState) -> None:
        """Dim the board and show the final score with restart instructions."""
        overlay = pygame.Surface(
            (self.board_pixel_width, self.board_pixel_height), pygame.SRCALPHA
        )
        overlay.fill((0, 0, 0, 150))
        self.screen.blit(overlay, (0, 0))

        lines = [
            (self._large_font, "GAME OVER", (255, 50, 50)),
            (self._font, f"Final score: {state.score}", (255, 255, 255)),
            (self._font, "Press R to restart", (255, 255, 255)),
            (self._font, "Press ESC to quit", (200, 200, 200)),
        ]
        cx = self.board_pixel_width // 2
        y = self.board_pixel_height // 2 - 60
        for font, text, color in lines:
            surface = font.render(text, True, color)
            self.screen.blit(surface, (cx - surface.get_width() // 2, y))
            y += surface.get_height() + 10

    def _draw_text(self, text: str, x: int, y: int, color: tuple[int, int, int] = TEXT_COLOR) -> None:
        surface = self._font.render(text, True, color)
        self.screen.blit(surface, (x, y))

    def close(self) -> None:
        """Shut down Pygame and close the window."""
        if self._initialized:
            pygame.quit()
            self._initialized = False
