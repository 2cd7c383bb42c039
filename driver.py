# driver.py
"""
Fixed-interval animation driver.

The driver owns the pygame timer that triggers ticks. On every timer event
it advances the simulation and asks the renderer to draw the new snapshot.
Timing lives here so the simulation core stays free of I/O.
"""
import logging
import pygame
from constants import DEFAULT_TICK_INTERVAL_MS

# Forward reference for type hinting to avoid circular import
from typing import TYPE_CHECKING
if TYPE_CHECKING:
    from simulation import Simulation

# --- Data Contracts ---
#
# class AnimationDriver:
#   - __init__(self, simulation, renderer, interval_ms: int = 20, log_throttle: int = 100):
#     - renderer: any object with render(snapshot) -> None.
#   - start(self) -> None: stops any running timer, then arms a new one.
#   - stop(self) -> None: disarms the timer. No-op when already stopped.
#   - reset(self) -> None: resets the simulation, then renders once.
#   - do_frame(self) -> None: advances one tick, then renders.
#   - handle_event(self, event) -> bool: True if the event was a tick.

TICK_EVENT = pygame.USEREVENT + 1


class AnimationDriver:
    """
    Fires simulation ticks at a fixed cadence using a pygame timer.
    """
    def __init__(self, simulation: "Simulation", renderer, interval_ms: int = DEFAULT_TICK_INTERVAL_MS,
                 log_throttle: int = 100):
        if interval_ms <= 0:
            msg = f"Configuration error: tick interval must be positive, got {interval_ms}."
            logging.critical(msg)
            raise ValueError(msg)
        self.simulation = simulation
        self.renderer = renderer
        self.interval_ms = int(interval_ms)
        self.log_throttle = max(int(log_throttle), 1)
        self.running = False
        self.step_num = 0

        logging.info(f"AnimationDriver initialized ({self.interval_ms} ms per tick).")

    def start(self):
        """Begin firing ticks. Restarts the timer if it is already running."""
        self.stop()
        pygame.time.set_timer(TICK_EVENT, self.interval_ms)
        self.running = True
        logging.info("Animation started.")

    def stop(self):
        """Halt firing ticks."""
        if not self.running:
            return
        pygame.time.set_timer(TICK_EVENT, 0)
        self.running = False
        logging.info(f"Animation stopped after {self.step_num} step(s).")

    def toggle(self):
        if self.running:
            self.stop()
        else:
            self.start()

    def reset(self):
        """Reset the system to an empty state and redraw."""
        self.simulation.reset()
        self.step_num = 0
        logging.info("Simulation reset.")
        self.renderer.render(self.simulation.snapshot())

    def do_frame(self):
        """Execute one frame: update the system and repaint."""
        self.simulation.step()
        self.step_num += 1
        snapshot = self.simulation.snapshot()

        # Hot loops must throttle logs
        if self.step_num % self.log_throttle == 0:
            logging.info(f"Simulation step {self.step_num} | {len(snapshot)} live particle(s)")

        self.renderer.render(snapshot)

    def handle_event(self, event) -> bool:
        if event.type == TICK_EVENT:
            self.do_frame()
            return True
        return False
