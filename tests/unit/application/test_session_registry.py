"""Unit tests for SessionRegistry."""

import asyncio

import pytest

from copytrader.application.copytrading.services import SessionRegistry, SessionRunner
from copytrader.domain.copytrading import DecimalsCache, SessionState, SwapDecoder

MASTER = "0x" + "ab" * 32
OTHER_MASTER = "0x" + "cd" * 31 + "ef"
FOLLOWER_ID = 42


@pytest.fixture
async def registry(store, chain_reader, executor, credentials, event_bus):
    created: list[SessionRunner] = []

    def runner_factory(session):
        runner = SessionRunner(
            session,
            store=store,
            chain_reader=chain_reader,
            decoder=SwapDecoder(DecimalsCache(chain_reader)),
            executor=executor,
            credentials=credentials,
            event_bus=event_bus,
            poll_interval=0.01,
        )
        created.append(runner)
        return runner

    registry = SessionRegistry(runner_factory)
    registry.created = created
    yield registry
    await registry.shutdown(timeout=1.0)


class TestSessionRegistry:
    """Tests для insert-if-absent семантики."""

    @pytest.mark.asyncio
    async def test_start_twice_returns_same_runner(self, registry, store):
        # Arrange
        session = await store.create_session(FOLLOWER_ID, MASTER)

        # Act
        first = await registry.start(session)
        second = await registry.start(session)

        # Assert
        assert first is second
        assert len(registry.created) == 1
        assert len(registry) == 1
        assert (FOLLOWER_ID, MASTER) in registry

    @pytest.mark.asyncio
    async def test_concurrent_starts_create_one_runner(self, registry, store):
        session = await store.create_session(FOLLOWER_ID, MASTER)

        runners = await asyncio.gather(*(registry.start(session) for _ in range(5)))

        assert len({id(r) for r in runners}) == 1
        assert len(registry.created) == 1

    @pytest.mark.asyncio
    async def test_different_masters_get_separate_runners(self, registry, store):
        a = await store.create_session(FOLLOWER_ID, MASTER)
        b = await store.create_session(FOLLOWER_ID, OTHER_MASTER)

        await registry.start(a)
        await registry.start(b)

        assert sorted(registry.active_keys()) == sorted(
            [(FOLLOWER_ID, MASTER), (FOLLOWER_ID, OTHER_MASTER)]
        )

    @pytest.mark.asyncio
    async def test_stopped_runner_is_forgotten(self, registry, store):
        # Arrange
        session = await store.create_session(FOLLOWER_ID, MASTER)
        runner = await registry.start(session)

        # Act
        await store.set_active(session.id, False)
        assert registry.stop(session.id) is True
        await runner.wait_stopped(timeout=1.0)
        await asyncio.sleep(0)

        # Assert
        assert registry.get(FOLLOWER_ID, MASTER) is None
        assert registry.stop(session.id) is False

    @pytest.mark.asyncio
    async def test_new_session_replaces_runner_of_stopped_one(self, registry, store):
        # Arrange
        old = await store.create_session(FOLLOWER_ID, MASTER)
        old_runner = await registry.start(old)
        await store.set_active(old.id, False)

        # Act
        new = await store.create_session(FOLLOWER_ID, MASTER)
        new_runner = await registry.start(new)
        await old_runner.wait_stopped(timeout=1.0)
        await asyncio.sleep(0)

        # Assert
        assert new_runner is not old_runner
        assert registry.get(FOLLOWER_ID, MASTER) is new_runner
        assert registry.get_by_session_id(new.id) is new_runner

    @pytest.mark.asyncio
    async def test_old_runner_finishes_before_new_one_starts(self, registry, store):
        # Arrange
        old = await store.create_session(FOLLOWER_ID, MASTER)
        old_runner = await registry.start(old)
        await store.set_active(old.id, False)
        new = await store.create_session(FOLLOWER_ID, MASTER)

        # Act
        new_runner = await registry.start(new)

        # Assert
        assert old_runner.done
        assert old_runner.state is SessionState.STOPPED
        assert not new_runner.done
        assert registry.created == [old_runner, new_runner]

    @pytest.mark.asyncio
    async def test_replace_cancels_runner_that_does_not_stop(
        self, store, chain_reader, executor, credentials, event_bus
    ):
        # Arrange
        gate = asyncio.Event()

        class StuckRunner(SessionRunner):
            async def _run(self):
                await gate.wait()

        def runner_factory(session):
            return StuckRunner(
                session,
                store=store,
                chain_reader=chain_reader,
                decoder=SwapDecoder(DecimalsCache(chain_reader)),
                executor=executor,
                credentials=credentials,
                event_bus=event_bus,
                poll_interval=0.01,
            )

        registry = SessionRegistry(runner_factory, replace_timeout=0.05)
        old = await store.create_session(FOLLOWER_ID, MASTER)
        old_runner = await registry.start(old)
        await store.set_active(old.id, False)
        new = await store.create_session(FOLLOWER_ID, MASTER)

        # Act
        new_runner = await registry.start(new)

        # Assert
        assert old_runner.task.cancelled()
        assert registry.get(FOLLOWER_ID, MASTER) is new_runner
        await registry.shutdown(timeout=0.05)

    @pytest.mark.asyncio
    async def test_resume_active_starts_stored_sessions(self, registry, store):
        # Arrange
        await store.create_session(FOLLOWER_ID, MASTER)
        stopped = await store.create_session(FOLLOWER_ID, OTHER_MASTER)
        await store.set_active(stopped.id, False)

        # Act
        count = await registry.resume_active(store)

        # Assert
        assert count == 1
        assert registry.active_keys() == [(FOLLOWER_ID, MASTER)]

    @pytest.mark.asyncio
    async def test_shutdown_stops_all_runners(self, registry, store):
        # Arrange
        runner = await registry.start(await store.create_session(FOLLOWER_ID, MASTER))

        # Act
        await registry.shutdown(timeout=1.0)

        # Assert
        assert runner.state is SessionState.STOPPED
        assert runner.done
        assert len(await store.list_all_active_sessions()) == 1
