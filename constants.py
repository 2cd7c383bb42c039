# constants.py
"""
Application-level constants.

These values are static and do not change between simulation runs.
They are fundamental to the application's framework, such as rendering
properties and window sizes, and are not part of the experimental
configuration.
"""

# Visualization settings
CANVAS_WIDTH = 600
CANVAS_HEIGHT = 600
# Simulation coordinate (0, 0) is drawn at the centre of the canvas.
ORIGIN_OFFSET = (CANVAS_WIDTH // 2, CANVAS_HEIGHT // 2)
WINDOW_CAPTION = "Particle Emitter"
BACKGROUND_COLOR = (238, 238, 238)  # Light Gray
DEFAULT_PARTICLE_COLOR = (0, 0, 255)  # Blue
PARTICLE_MARKER_SIZE = 2
# Horizontal gap between a marker and its id label.
LABEL_OFFSET = 2
DEFAULT_LABEL_FONT_SIZE = 10

# Timing
DEFAULT_TICK_INTERVAL_MS = 20
