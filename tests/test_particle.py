from __future__ import annotations

import numpy as np
import pytest

from particle import Particle, ParticleFactory, ParticleSet, ParticleSystem


def test_factory_ids_start_at_one_and_increase():
    factory = ParticleFactory(np.random.default_rng(0))
    ids = [factory.create().id for _ in range(50)]
    assert ids == list(range(1, 51))


def test_factory_defaults():
    factory = ParticleFactory(np.random.default_rng(1))
    p = factory.create()
    assert (p.x, p.y, p.age) == (0.0, 0.0, 0)
    assert -2.0 <= p.vx <= 2.0
    assert -2.0 <= p.vy <= 2.0


def test_factory_draws_vx_then_vy_from_injected_rng():
    factory = ParticleFactory(np.random.default_rng(42))
    expected = np.random.default_rng(42)
    vx = expected.uniform(-2.0, 2.0)
    vy = expected.uniform(-2.0, 2.0)
    p = factory.create()
    assert p.vx == vx
    assert p.vy == vy


def test_velocities_cover_range() -> None:
    factory = ParticleFactory(np.random.default_rng(5))
    v = np.array([(p.vx, p.vy) for p in (factory.create() for _ in range(2000))])
    assert v.min() >= -2.0 and v.max() <= 2.0
    assert v.min() < -1.9 and v.max() > 1.9


def test_overrides_win_and_counter_advances_once():
    factory = ParticleFactory(np.random.default_rng(2))
    p = factory.create(x=100.0, y=-50.0, vx=0.5, vy=0.25, age=3)
    assert p == Particle(id=1, x=100.0, y=-50.0, vx=0.5, vy=0.25, age=3)
    q = factory.create(id=99)
    assert q.id == 99
    assert factory.create().id == 3


def test_unknown_override_raises():
    factory = ParticleFactory(np.random.default_rng(2))
    with pytest.raises(TypeError):
        factory.create(mass=1.0)


def test_factory_reset_restarts_ids():
    factory = ParticleFactory(np.random.default_rng(3))
    factory.create()
    factory.create()
    factory.reset()
    assert factory.next_id == 1
    assert factory.create().id == 1


def test_particle_set_round_trip_and_order():
    particles = [Particle(id=i, x=i * 1.0, y=-i * 1.0, vx=0.1, vy=0.2, age=i) for i in (3, 1, 2)]
    ps = ParticleSet.from_particles(particles)
    assert len(ps) == 3
    assert list(ps) == particles
    assert ps.ids.dtype == np.uint64
    assert ps.ages.dtype == np.uint64
    assert ps.positions.shape == (3, 2)


def test_particle_set_is_read_only():
    ps = ParticleSet.from_particles([Particle(id=1)])
    with pytest.raises(ValueError):
        ps.positions[0, 0] = 5.0
    with pytest.raises(ValueError):
        ps.ages[0] = 7


def test_particle_set_does_not_alias_inputs():
    positions = np.zeros((1, 2))
    ps = ParticleSet(ids=[1], positions=positions, velocities=[[0.0, 0.0]], ages=[0])
    positions[0, 0] = 9.0
    assert ps.positions[0, 0] == 0.0


def test_particle_set_rejects_mismatched_lengths():
    with pytest.raises(ValueError):
        ParticleSet(ids=[1, 2], positions=[[0.0, 0.0]], velocities=[[0.0, 0.0]], ages=[0])


def test_append_leaves_source_set_untouched():
    empty = ParticleSet.empty()
    one = empty.append(Particle(id=1, x=2.0, y=3.0))
    assert len(empty) == 0
    assert len(one) == 1
    assert one[0] == Particle(id=1, x=2.0, y=3.0)


def test_particle_system_starts_empty_and_resets():
    system = ParticleSystem({'seed': 1})
    assert len(system.particles) == 0
    assert system.next_id == 1
    system.factory.create()
    system.particles = system.particles.append(Particle(id=1))
    system.reset()
    assert len(system.particles) == 0
    assert system.next_id == 1


def test_particle_system_seed_is_reproducible():
    a = ParticleSystem({'seed': 123}).factory.create()
    b = ParticleSystem({'seed': 123}).factory.create()
    assert a == b


@pytest.mark.parametrize("bad", [[2.0, -2.0], [1.0], "fast", None])
def test_particle_system_rejects_bad_velocity_range(bad):
    with pytest.raises(ValueError):
        ParticleSystem({'velocity_range': bad})
