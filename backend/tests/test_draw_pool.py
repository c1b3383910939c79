import random

import pytest

from lota.services.games import DrawPool


@pytest.mark.parametrize('n', [1, 2, 10, 75, 100])
def test_draining_yields_every_number_once(n):
    pool = DrawPool()
    pool.initialize(n)
    drawn = [pool.draw() for _ in range(n)]
    assert sorted(drawn) == list(range(1, n + 1))
    assert pool.draw() is None
    assert len(pool) == 0


def test_seeded_pools_are_reproducible_and_shuffled():
    first, second = DrawPool(rng=random.Random(7)), DrawPool(rng=random.Random(7))
    first.initialize(50)
    second.initialize(50)
    assert first.numbers == second.numbers
    assert first.numbers != list(range(1, 51))


def test_draw_pops_from_the_end():
    pool = DrawPool(rng=random.Random(1))
    pool.initialize(5)
    expected = pool.numbers[-1]
    assert pool.draw() == expected
    assert expected not in pool.numbers


def test_initialize_replaces_leftovers():
    pool = DrawPool()
    pool.initialize(10)
    pool.draw()
    pool.initialize(3)
    assert sorted(pool.numbers) == [1, 2, 3]


def test_empty_pool_draws_none():
    assert DrawPool().draw() is None
