# simulation.py
"""
Handles the per-tick update of the particle system.

This module defines the Pipeline class, an ordered list of behaviour
stages, and the Simulation class, which runs the pipeline over the current
particle set once per tick and writes the result back to the system.
"""
import logging
import numpy as np
from functools import partial
from typing import Dict, Any, Callable, List, Tuple
from particle import ParticleSystem, ParticleSet, ParticleFactory
from vector import Vector2D
import behaviors

# --- Data Contracts ---
#
# class Pipeline:
#   - from_params(params: Dict[str, Any], factory: ParticleFactory) -> Pipeline:
#     - Inputs:
#       - params: Dictionary of simulation parameters from config.json.
#         - "emit_origin": [x, y]
#         - "wind": [vx, vy]
#         - "max_age": int >= 0
#         - "drag_coefficient": float
#         - "pipeline": list of stage names, integrate last (null = default)
#     - Raises: ValueError on an invalid stage order or parameter.
#   - run(self, particles: ParticleSet) -> ParticleSet:
#     - Total: never fails for a valid ParticleSet.
#     - Each stage consumes the output of the previous one.
#
# class Simulation:
#   - __init__(self, particles: ParticleSystem, params: Dict[str, Any])
#   - step(self) -> None:
#     - Side Effects: replaces particles.particles with the pipeline output
#       in a single assignment. The id counter advances through emit.
#   - reset(self) -> None: delegates to ParticleSystem.reset().
#   - snapshot(self) -> ParticleSet: the current read-only particle set.

DEFAULT_EMIT_ORIGIN = (100.0, -50.0)
DEFAULT_WIND = (-2.0, 1.0)
DEFAULT_MAX_AGE = 200
DEFAULT_DRAG_COEFFICIENT = 0.01
DEFAULT_PIPELINE = ("emit", "wind", "kill_by_age", "integrate")
STAGE_NAMES = ("emit", "wind", "drag", "kill_by_age", "integrate")
# Ages are stored as uint64.
MAX_AGE_LIMIT = int(np.iinfo(np.uint64).max)

Stage = Callable[[ParticleSet], ParticleSet]


def _config_error(msg: str) -> ValueError:
    logging.critical(msg)
    return ValueError(msg)


class Pipeline:
    """
    The node network: the ordered list of behaviours and their settings.
    """
    def __init__(self, stages: List[Tuple[str, Stage]]):
        self.stages = list(stages)

    @property
    def stage_names(self) -> List[str]:
        return [name for name, _ in self.stages]

    @classmethod
    def from_params(cls, params: Dict[str, Any], factory: ParticleFactory) -> "Pipeline":
        """Builds the pipeline described by the simulation parameters."""
        try:
            origin = Vector2D.from_pair(params.get('emit_origin', DEFAULT_EMIT_ORIGIN), "emit_origin")
            wind = Vector2D.from_pair(params.get('wind', DEFAULT_WIND), "wind")
        except ValueError as e:
            raise _config_error(f"Configuration error: {e}") from e

        max_age = params.get('max_age', DEFAULT_MAX_AGE)
        if isinstance(max_age, bool) or not isinstance(max_age, int) or max_age < 0:
            raise _config_error(f"Configuration error: max_age must be a non-negative integer, got {max_age!r}.")
        if max_age > MAX_AGE_LIMIT:
            raise _config_error(f"Configuration error: max_age {max_age} exceeds the uint64 age range (max {MAX_AGE_LIMIT}).")

        drag_coefficient = params.get('drag_coefficient', DEFAULT_DRAG_COEFFICIENT)
        if isinstance(drag_coefficient, bool) or not isinstance(drag_coefficient, (int, float)):
            raise _config_error(f"Configuration error: drag_coefficient must be a number, got {drag_coefficient!r}.")

        order = params.get('pipeline')
        if order is None:
            order = DEFAULT_PIPELINE
        if isinstance(order, str) or not isinstance(order, (list, tuple)):
            raise _config_error(f"Configuration error: pipeline must be a list of stage names, got {order!r}.")
        order = list(order)
        unknown = [name for name in order if name not in STAGE_NAMES]
        if unknown:
            raise _config_error(f"Configuration error: unknown pipeline stage(s) {unknown}. Known stages: {list(STAGE_NAMES)}.")
        if len(set(order)) != len(order):
            raise _config_error(f"Configuration error: pipeline {order} lists a stage more than once.")
        if not order or order[-1] != "integrate":
            raise _config_error(f"Configuration error: pipeline {order} must end with 'integrate'.")

        factories = {
            "emit": lambda: partial(behaviors.emit, factory=factory, origin=origin),
            "wind": lambda: partial(behaviors.wind, vx=wind.x, vy=wind.y),
            "drag": lambda: partial(behaviors.drag, coeff=float(drag_coefficient)),
            "kill_by_age": lambda: partial(behaviors.kill_by_age, max_age=max_age),
            "integrate": lambda: behaviors.integrate,
        }
        pipeline = cls([(name, factories[name]()) for name in order])

        logging.info(
            f"Pipeline configured: {' -> '.join(order)} "
            f"(origin={origin.as_tuple()}, wind={wind.as_tuple()}, max_age={max_age})."
        )
        return pipeline

    def run(self, particles: ParticleSet) -> ParticleSet:
        for name, stage in self.stages:
            particles = stage(particles)
            logging.debug(f"Stage '{name}' produced {len(particles)} particle(s).")
        return particles


class Simulation:
    """
    Advances the particle system one tick at a time.
    """
    def __init__(self, particles: ParticleSystem, params: Dict[str, Any]):
        """
        Initializes the simulation.

        Args:
            particles (ParticleSystem): The state to advance.
            params (Dict[str, Any]): Simulation parameters from config.
        """
        self.particles = particles
        self.pipeline = Pipeline.from_params(params, particles.factory)
        self.tick = 0

        logging.info("Simulation logic initialized and configuration validated.")

    def step(self):
        """
        Executes one time step of the simulation.

        The current particle set is read once, passed through every stage in
        order and written back in a single assignment.
        """
        self.particles.particles = self.pipeline.run(self.particles.particles)
        self.tick += 1

    def reset(self):
        """Resets the system to an empty state. Never called by step()."""
        self.particles.reset()
        self.tick = 0

    def snapshot(self) -> ParticleSet:
        return self.particles.particles
