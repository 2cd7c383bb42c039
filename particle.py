# particle.py
"""
Manages the state of all particles in the simulation.

This module defines the Particle record, the ParticleSet container that
stores a particle sequence in read-only NumPy arrays, the ParticleFactory
that hands out unique ids and random velocities, and the ParticleSystem
class that holds the current state of the simulation.
"""
import logging
import dataclasses
import numpy as np
from dataclasses import dataclass
from typing import Dict, Any, Iterable, Iterator, Optional, Tuple

# --- Data Contracts ---
#
# class Particle (frozen record):
#   - id: int, unique, assigned once at creation, never reused.
#   - x, y: float, position.
#   - vx, vy: float, velocity.
#   - age: int, starts at 0, incremented once per tick by integration.
#
# class ParticleSet:
#   - ids: NumPy array of shape (N,) of dtype uint64.
#   - positions: NumPy array of shape (N, 2) of dtype float64.
#   - velocities: NumPy array of shape (N, 2) of dtype float64.
#   - ages: NumPy array of shape (N,) of dtype uint64.
#   - Invariants: all arrays share the same length N and are read-only.
#     Row order is emission order.
#
# class ParticleFactory:
#   - create(self, **overrides) -> Particle:
#     - Side Effects: advances the id counter exactly once and draws vx
#       then vy from the random source.
#   - reset(self) -> None: the next created particle gets id 1 again.
#
# class ParticleSystem:
#   - __init__(self, params: Dict[str, Any], rng: Optional[np.random.Generator] = None)
#     - Inputs:
#       - params: Dictionary of simulation parameters from config.json.
#         - "seed": int or None
#         - "velocity_range": [low, high]
#   - particles: the current ParticleSet, replaced wholesale once per tick.
#   - reset(self) -> None: empties the particle set and restarts ids at 1.

DEFAULT_VELOCITY_RANGE = (-2.0, 2.0)


@dataclass(frozen=True)
class Particle:
    """A single point particle."""
    id: int
    x: float = 0.0
    y: float = 0.0
    vx: float = 0.0
    vy: float = 0.0
    age: int = 0


def _frozen(values, dtype, shape) -> np.ndarray:
    arr = np.array(values, dtype=dtype).reshape(shape)
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True, eq=False)
class ParticleSet:
    """
    An ordered, immutable sequence of particles stored column-wise.
    """
    ids: np.ndarray
    positions: np.ndarray
    velocities: np.ndarray
    ages: np.ndarray

    def __post_init__(self):
        object.__setattr__(self, 'ids', _frozen(self.ids, np.uint64, (-1,)))
        object.__setattr__(self, 'positions', _frozen(self.positions, np.float64, (-1, 2)))
        object.__setattr__(self, 'velocities', _frozen(self.velocities, np.float64, (-1, 2)))
        object.__setattr__(self, 'ages', _frozen(self.ages, np.uint64, (-1,)))

        count = self.ids.shape[0]
        lengths = (self.positions.shape[0], self.velocities.shape[0], self.ages.shape[0])
        if any(n != count for n in lengths):
            raise ValueError(
                f"ParticleSet arrays must share one length, got ids={count}, "
                f"positions={lengths[0]}, velocities={lengths[1]}, ages={lengths[2]}."
            )

    @classmethod
    def empty(cls) -> "ParticleSet":
        return cls(ids=[], positions=[], velocities=[], ages=[])

    @classmethod
    def from_particles(cls, particles: Iterable[Particle]) -> "ParticleSet":
        particles = list(particles)
        return cls(
            ids=[p.id for p in particles],
            positions=[(p.x, p.y) for p in particles],
            velocities=[(p.vx, p.vy) for p in particles],
            ages=[p.age for p in particles],
        )

    def __len__(self) -> int:
        return self.ids.shape[0]

    def __getitem__(self, index: int) -> Particle:
        return Particle(
            id=int(self.ids[index]),
            x=float(self.positions[index, 0]),
            y=float(self.positions[index, 1]),
            vx=float(self.velocities[index, 0]),
            vy=float(self.velocities[index, 1]),
            age=int(self.ages[index]),
        )

    def __iter__(self) -> Iterator[Particle]:
        for i in range(len(self)):
            yield self[i]

    def replace(self, **arrays) -> "ParticleSet":
        """Returns a copy with the given columns swapped out."""
        return dataclasses.replace(self, **arrays)

    def select(self, mask: np.ndarray) -> "ParticleSet":
        """Returns the rows where mask is True, keeping their order."""
        return ParticleSet(
            ids=self.ids[mask],
            positions=self.positions[mask],
            velocities=self.velocities[mask],
            ages=self.ages[mask],
        )

    def append(self, particle: Particle) -> "ParticleSet":
        """Returns a copy with one particle added at the end."""
        return ParticleSet(
            ids=np.append(self.ids, np.uint64(particle.id)),
            positions=np.vstack([self.positions, [(particle.x, particle.y)]]),
            velocities=np.vstack([self.velocities, [(particle.vx, particle.vy)]]),
            ages=np.append(self.ages, np.uint64(particle.age)),
        )


class ParticleFactory:
    """
    Creates particles with unique ids and uniformly random velocities.
    """
    def __init__(self, rng: Optional[np.random.Generator] = None,
                 velocity_range: Tuple[float, float] = DEFAULT_VELOCITY_RANGE):
        self.rng = rng if rng is not None else np.random.default_rng()
        self.velocity_low, self.velocity_high = velocity_range
        self._last_id = 0

    @property
    def next_id(self) -> int:
        return self._last_id + 1

    def _generate_id(self) -> int:
        self._last_id += 1
        return self._last_id

    def create(self, **overrides) -> Particle:
        """
        Creates a particle at the origin with a random velocity.

        Any keyword overrides replace the defaults. Unknown field names
        raise TypeError.
        """
        particle = Particle(
            id=self._generate_id(),
            x=0.0,
            y=0.0,
            vx=float(self.rng.uniform(self.velocity_low, self.velocity_high)),
            vy=float(self.rng.uniform(self.velocity_low, self.velocity_high)),
            age=0,
        )
        if overrides:
            particle = dataclasses.replace(particle, **overrides)
        return particle

    def reset(self):
        self._last_id = 0


class ParticleSystem:
    """
    The mutable simulation state: the current particle set and the id counter.
    """
    def __init__(self, params: Dict[str, Any], rng: Optional[np.random.Generator] = None):
        """
        Initializes an empty particle system.

        Args:
            params (Dict[str, Any]): Simulation parameters from config.
            rng (Optional[np.random.Generator]): Random source for particle
                velocities. Built from params["seed"] when omitted.
        """
        self.seed = params.get('seed')
        velocity_range = params.get('velocity_range', DEFAULT_VELOCITY_RANGE)
        try:
            low, high = (float(v) for v in velocity_range)
        except (TypeError, ValueError):
            low, high = None, None
        if low is None or low > high:
            msg = (
                f"Configuration error: velocity_range {velocity_range!r} must be "
                f"a [low, high] pair with low <= high."
            )
            logging.critical(msg)
            raise ValueError(msg)

        # All randomness is controlled by a single seed.
        if rng is None:
            rng = np.random.default_rng(self.seed)
        self.factory = ParticleFactory(rng, (low, high))
        self.particles = ParticleSet.empty()

        logging.info(
            f"ParticleSystem initialized (seed={self.seed}, "
            f"velocity range=[{low}, {high}])."
        )

    @property
    def next_id(self) -> int:
        return self.factory.next_id

    def reset(self):
        """Empties the system and restarts id assignment at 1."""
        self.particles = ParticleSet.empty()
        self.factory.reset()
        logging.info("ParticleSystem reset to empty state.")
