# visualization.py
"""
Handles the visualization of the particle system using Pygame.
"""
import logging
import pygame
from particle import ParticleSet
from constants import (
    CANVAS_WIDTH, CANVAS_HEIGHT, ORIGIN_OFFSET, WINDOW_CAPTION,
    BACKGROUND_COLOR, DEFAULT_PARTICLE_COLOR, PARTICLE_MARKER_SIZE,
    LABEL_OFFSET, DEFAULT_LABEL_FONT_SIZE
)
from typing import Tuple, Optional

# Forward reference for type hinting to avoid circular import
from typing import TYPE_CHECKING
if TYPE_CHECKING:
    from driver import AnimationDriver


# --- Data Contracts ---
#
# class Visualizer:
#   - __init__(self, vis_params: Optional[dict] = None):
#     - Inputs:
#       - vis_params: "visualization" section of config.json.
#         - "particle_color": [r, g, b]
#         - "label_font_size": int
#         - "caption": str
#     - Side Effects: Initializes Pygame and creates a 600x600 window.
#
#   - render(self, snapshot: ParticleSet) -> None:
#     - Draws each particle as a small square with its id next to it.
#       Simulation (0, 0) maps to the centre of the canvas.
#     - Never modifies the snapshot.
#
#   - handle_event(self, event, driver: AnimationDriver) -> bool:
#     - Outputs: False if the user has quit, True otherwise.
#     - Side Effects: SPACE toggles the driver, R resets it, S steps once
#       while stopped.


def to_canvas(x: float, y: float, offset: Tuple[int, int] = ORIGIN_OFFSET) -> Tuple[int, int]:
    """Translates a simulation position to integer canvas pixels."""
    return int(x) + offset[0], int(y) + offset[1]


class Visualizer:
    """
    Renders particle snapshots and maps keyboard input to driver commands.
    """
    def __init__(self, vis_params: Optional[dict] = None):
        """
        Initializes Pygame and the display window.
        """
        self.vis_params = vis_params if vis_params is not None else {}

        pygame.init()
        pygame.font.init()

        self.screen = pygame.display.set_mode((CANVAS_WIDTH, CANVAS_HEIGHT))
        pygame.display.set_caption(self.vis_params.get('caption', WINDOW_CAPTION))

        self.color = self._initialize_color(self.vis_params.get('particle_color'))
        font_size = self.vis_params.get('label_font_size', DEFAULT_LABEL_FONT_SIZE)
        self.font = pygame.font.SysFont("monospace", font_size)

        logging.info(f"Visualizer initialized with Pygame display ({CANVAS_WIDTH}x{CANVAS_HEIGHT}).")

    def _initialize_color(self, config_color) -> pygame.Color:
        """Loads the particle color from config, falling back to the default."""
        if not config_color:
            return pygame.Color(DEFAULT_PARTICLE_COLOR)
        try:
            return pygame.Color(config_color)
        except (ValueError, TypeError) as e:
            logging.error(f"Could not parse particle_color from config: {e}. Falling back to default.")
            return pygame.Color(DEFAULT_PARTICLE_COLOR)

    def render(self, snapshot: ParticleSet):
        """
        Draws the particle system.

        Each particle is drawn as a dot with its id.
        """
        self.screen.fill(BACKGROUND_COLOR)

        for particle in snapshot:
            px, py = to_canvas(particle.x, particle.y)
            pygame.draw.rect(
                self.screen,
                self.color,
                pygame.Rect(px, py, PARTICLE_MARKER_SIZE, PARTICLE_MARKER_SIZE)
            )
            label = self.font.render(str(particle.id), True, self.color)
            # Label baseline sits at the particle's y, like a text draw call.
            self.screen.blit(label, (px + LABEL_OFFSET, py - self.font.get_ascent()))

        pygame.display.flip()

    def handle_event(self, event, driver: "AnimationDriver") -> bool:
        """
        Handles a single Pygame event.

        Returns:
            bool: False if the application should exit, True otherwise.
        """
        if event.type == pygame.QUIT:
            logging.info("Quit event received. Shutting down visualizer.")
            return False

        if event.type == pygame.KEYDOWN:
            if event.key == pygame.K_ESCAPE:
                logging.info("ESC key pressed. Shutting down visualizer.")
                return False
            if event.key == pygame.K_SPACE:
                driver.toggle()
            elif event.key == pygame.K_r:
                driver.reset()
            elif event.key == pygame.K_s and not driver.running:
                driver.do_frame()

        return True

    def close(self):
        """Shuts down Pygame."""
        pygame.font.quit()
        pygame.quit()
