from __future__ import annotations

import numpy as np
import pytest

import behaviors
from particle import Particle, ParticleFactory, ParticleSet
from vector import Vector2D


def make_set(rng: np.random.Generator, n: int = 20, max_age: int = 10) -> ParticleSet:
    return ParticleSet(
        ids=np.arange(1, n + 1),
        positions=rng.uniform(-100, 100, size=(n, 2)),
        velocities=rng.uniform(-2, 2, size=(n, 2)),
        ages=rng.integers(0, max_age + 1, size=n),
    )


def test_emit_appends_one_particle_at_origin():
    factory = ParticleFactory(np.random.default_rng(0))
    before = make_set(np.random.default_rng(1), n=3)
    for _ in range(3):
        factory.create()
    after = behaviors.emit(before, factory, Vector2D(100.0, -50.0))
    assert len(after) == 4
    assert list(after)[:3] == list(before)
    new = after[3]
    assert (new.id, new.x, new.y, new.age) == (4, 100.0, -50.0, 0)
    assert -2.0 <= new.vx <= 2.0 and -2.0 <= new.vy <= 2.0
    assert len(before) == 3


def test_wind_shifts_positions_only():
    ps = make_set(np.random.default_rng(2))
    out = behaviors.wind(ps, -2.0, 1.0)
    np.testing.assert_array_equal(out.positions, ps.positions + np.array([-2.0, 1.0]))
    np.testing.assert_array_equal(out.velocities, ps.velocities)
    np.testing.assert_array_equal(out.ages, ps.ages)
    np.testing.assert_array_equal(out.ids, ps.ids)


def test_zero_wind_is_identity_on_positions():
    ps = make_set(np.random.default_rng(3))
    out = behaviors.wind(ps, 0.0, 0.0)
    np.testing.assert_array_equal(out.positions, ps.positions)


def test_kill_by_age_keeps_age_at_or_below_threshold():
    ps = make_set(np.random.default_rng(4), n=50, max_age=10)
    out = behaviors.kill_by_age(ps, 5)
    expected = [p for p in ps if p.age <= 5]
    assert list(out) == expected
    assert all(p.age <= 5 for p in out)


def test_kill_by_age_is_idempotent():
    ps = make_set(np.random.default_rng(5), n=50, max_age=10)
    once = behaviors.kill_by_age(ps, 4)
    twice = behaviors.kill_by_age(once, 4)
    assert list(once) == list(twice)


def test_kill_by_age_zero_threshold_keeps_newborns():
    ps = ParticleSet.from_particles([Particle(id=1, age=0), Particle(id=2, age=1)])
    assert [p.id for p in behaviors.kill_by_age(ps, 0)] == [1]


def test_kill_by_age_on_empty_set():
    assert len(behaviors.kill_by_age(ParticleSet.empty(), 200)) == 0


def test_integrate_moves_and_ages():
    ps = make_set(np.random.default_rng(6))
    out = behaviors.integrate(ps)
    np.testing.assert_array_equal(out.positions, ps.positions + ps.velocities)
    np.testing.assert_array_equal(out.velocities, ps.velocities)
    np.testing.assert_array_equal(out.ages, ps.ages + np.uint64(1))
    assert out.ages.dtype == np.uint64


def test_drag_matches_vector_path():
    ps = make_set(np.random.default_rng(7))
    coeff = 0.3
    out = behaviors.drag(ps, coeff)
    for before, after in zip(ps, out):
        v = Vector2D(before.vx, before.vy)
        speed = v.magnitude()
        expected = v.scale(-1).normalize().scale(coeff * speed * speed)
        assert after.x == pytest.approx(expected.x, rel=1e-15, abs=1e-300)
        assert after.y == pytest.approx(expected.y, rel=1e-15, abs=1e-300)
        # Velocity is read, not written.
        assert (after.vx, after.vy) == (before.vx, before.vy)


def test_drag_zero_velocity_lands_at_origin():
    ps = ParticleSet.from_particles([Particle(id=1, x=5.0, y=6.0, vx=0.0, vy=0.0)])
    out = behaviors.drag(ps, 0.5)
    assert out[0].x == 0.0 and out[0].y == 0.0


def test_drag_on_empty_set():
    assert len(behaviors.drag(ParticleSet.empty(), 0.1)) == 0


def test_stages_do_not_mutate_input():
    ps = make_set(np.random.default_rng(8))
    snapshot = [p for p in ps]
    behaviors.wind(ps, 1.0, 1.0)
    behaviors.integrate(ps)
    behaviors.drag(ps, 0.1)
    behaviors.kill_by_age(ps, 0)
    assert list(ps) == snapshot
