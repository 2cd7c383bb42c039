# behaviors.py
"""
Particle behaviours: the stages a particle set passes through on each tick.

Every stage takes a ParticleSet and returns a new one. None of them mutate
their input. Apart from emit, which asks the factory for a new id, they
are pure functions.
"""
import logging
import numpy as np
from numba import jit
from particle import ParticleSet, ParticleFactory
from vector import Vector2D

# --- Data Contracts ---
#
# emit(particles, factory, origin) -> ParticleSet
#   - Appends exactly one particle created at origin with a random velocity.
#   - Side Effects: advances the factory's id counter once.
#
# wind(particles, vx, vy) -> ParticleSet
#   - Shifts every position by (vx, vy). Velocity, age and id untouched.
#
# drag(particles, coeff) -> ParticleSet
#   - For each particle: speed = |v|, mag = coeff * speed^2, and the
#     POSITION becomes normalize(-v) * mag. Velocity is left untouched.
#     This is a known limitation: the result should be a force applied to
#     velocity, but it is written into the position fields instead.
#
# kill_by_age(particles, max_age) -> ParticleSet
#   - Keeps particles with age <= max_age, in order.
#
# integrate(particles) -> ParticleSet
#   - x += vx, y += vy, age += 1. Always the last stage of a tick.


@jit(nopython=True)
def _drag_numba(velocities, coeff):
    """
    Numba-jitted drag kernel.

    Mirrors Vector2D step by step (scale by -1, normalize with an exact
    zero check, scale by the drag magnitude) so results match the
    vector path bit for bit.
    """
    count = velocities.shape[0]
    out = np.empty((count, 2), dtype=np.float64)
    for i in range(count):
        vx = velocities[i, 0]
        vy = velocities[i, 1]
        speed = np.sqrt(vx * vx + vy * vy)
        drag_mag = coeff * speed * speed

        rx = vx * -1.0
        ry = vy * -1.0
        m = np.sqrt(rx * rx + ry * ry)
        if m != 0.0:
            rx = rx / m
            ry = ry / m

        out[i, 0] = rx * drag_mag
        out[i, 1] = ry * drag_mag
    return out


def emit(particles: ParticleSet, factory: ParticleFactory, origin: Vector2D) -> ParticleSet:
    """Emit one new particle from a point."""
    particle = factory.create(x=origin.x, y=origin.y)
    logging.debug(f"Emitted particle {particle.id} at ({origin.x}, {origin.y}).")
    return particles.append(particle)


def wind(particles: ParticleSet, vx: float, vy: float) -> ParticleSet:
    """Add a directional displacement to every position."""
    return particles.replace(positions=particles.positions + np.array([vx, vy], dtype=np.float64))


def drag(particles: ParticleSet, coeff: float) -> ParticleSet:
    """
    Apply drag. See the data contract above for the known limitation.

    Vector2D.scale(-1).normalize().scale(coeff * speed**2) is the reference
    path; _drag_numba inlines the same arithmetic.
    """
    if len(particles) == 0:
        return particles
    # Numba needs a writable contiguous buffer.
    positions = _drag_numba(np.ascontiguousarray(particles.velocities).copy(), float(coeff))
    return particles.replace(positions=positions)


def kill_by_age(particles: ParticleSet, max_age: int) -> ParticleSet:
    """Remove particles that are older than max_age."""
    survivors = particles.select(particles.ages <= np.uint64(max_age))
    removed = len(particles) - len(survivors)
    if removed:
        logging.debug(f"Removed {removed} particle(s) older than {max_age}.")
    return survivors


def integrate(particles: ParticleSet) -> ParticleSet:
    """Add the velocity to the position and increase the age."""
    return particles.replace(
        positions=particles.positions + particles.velocities,
        ages=particles.ages + np.uint64(1),
    )
