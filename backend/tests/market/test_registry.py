"""Tests for SubscriberRegistry."""

import asyncio

import pytest

from leaderboard.market.errors import DeliveryError


@pytest.mark.asyncio
class TestSubscriberRegistry:
    """Unit tests for the lock-guarded subscriber set."""

    async def test_add_and_contains(self, registry, make_subscriber):
        sub = make_subscriber()
        await registry.add(sub)
        assert sub in registry
        assert len(registry) == 1

    async def test_remove_is_idempotent(self, registry, make_subscriber):
        """Test that removing twice is safe and reports presence."""
        sub = make_subscriber()
        await registry.add(sub)

        assert await registry.remove(sub) is True
        assert await registry.remove(sub) is False
        assert sub not in registry

    async def test_remove_unknown(self, registry, make_subscriber):
        assert await registry.remove(make_subscriber()) is False

    async def test_identity_is_the_connection(self, registry, make_subscriber):
        """Test that two distinct connections are tracked separately."""
        await registry.add(make_subscriber())
        await registry.add(make_subscriber())
        assert len(registry) == 2

    async def test_for_each_visits_everyone(self, registry, make_subscriber):
        subs = [make_subscriber() for _ in range(3)]
        for sub in subs:
            await registry.add(sub)

        visited = []

        async def visit(sub):
            visited.append(sub)

        evicted = await registry.for_each(visit)

        assert evicted == []
        assert set(visited) == set(subs)

    async def test_for_each_evicts_on_delivery_error(self, registry, make_subscriber):
        """Test that a DeliveryError removes only that subscriber."""
        good, bad = make_subscriber(), make_subscriber()
        await registry.add(good)
        await registry.add(bad)

        async def visit(sub):
            if sub is bad:
                raise DeliveryError("boom")

        evicted = await registry.for_each(visit)

        assert evicted == [bad]
        assert bad not in registry
        assert good in registry

    async def test_other_errors_propagate(self, registry, make_subscriber):
        await registry.add(make_subscriber())

        async def visit(sub):
            raise RuntimeError("bug")

        with pytest.raises(RuntimeError):
            await registry.for_each(visit)

    async def test_add_waits_for_iteration(self, registry, make_subscriber):
        """Test that add() does not interleave with a for_each pass."""
        await registry.add(make_subscriber())
        release = asyncio.Event()
        seen_sizes = []

        async def visit(sub):
            await release.wait()
            seen_sizes.append(len(registry))

        iteration = asyncio.create_task(registry.for_each(visit))
        await asyncio.sleep(0.01)
        adder = asyncio.create_task(registry.add(make_subscriber()))
        await asyncio.sleep(0.01)
        assert not adder.done()

        release.set()
        await asyncio.gather(iteration, adder)

        assert seen_sizes == [1]
        assert len(registry) == 2
