"""
Tests for flush triggers: chunk limit, end of unit of work and redirect.
"""

import pytest
from unittest.mock import Mock

from deferred_sync.models.config import SyncConfig
from deferred_sync.sync.hooks import SyncHooks
from deferred_sync.sync.indexer import BulkIndexer, RecordingIndexer
from deferred_sync.sync.lifecycle import UnitOfWork
from deferred_sync.sync.manager import SyncManager


class TestChunkLimitTrigger:
    """Test threshold-based early flushing"""

    @pytest.fixture
    def indexer(self):
        return RecordingIndexer()

    def test_sixth_add_flushes_once_with_limit_five(self, indexer):
        manager = SyncManager("post", indexer, config=SyncConfig(chunk_limit=5))

        for object_id in range(1, 6):
            manager.add_to_queue(object_id)
            assert indexer.call_count == 0

        manager.add_to_queue(6)

        assert indexer.calls == [("post", [1, 2, 3, 4, 5, 6])]
        assert len(manager.sync_queue) == 0
        assert manager.chunk_limit_trigger.flush_count == 1

    def test_duplicates_do_not_count_towards_limit(self, indexer):
        manager = SyncManager("post", indexer, config=SyncConfig(chunk_limit=2))

        for _ in range(5):
            manager.add_to_queue(1)
        manager.add_to_queue(2)

        assert indexer.call_count == 0

    def test_no_limit_never_flushes_early(self, indexer):
        hooks = SyncHooks()
        manager = SyncManager("post", indexer, hooks=hooks)

        for object_id in range(500):
            manager.add_to_queue(object_id)

        assert indexer.call_count == 0
        assert len(manager.sync_queue) == 500
        assert hooks.get_listener_counts()["added"] == 0

    def test_zero_limit_flushes_every_add(self, indexer):
        manager = SyncManager("post", indexer, config=SyncConfig(chunk_limit=0))

        manager.add_to_queue(1)
        manager.add_to_queue(2)

        assert indexer.calls == [("post", [1]), ("post", [2])]

    def test_shared_hooks_only_flush_own_queue(self, indexer):
        hooks = SyncHooks()
        config = SyncConfig(chunk_limit=1)
        posts = SyncManager("post", indexer, hooks=hooks, config=config)
        terms = SyncManager("term", indexer, hooks=hooks, config=config)

        posts.add_to_queue(1)
        posts.add_to_queue(2)
        terms.add_to_queue(7)

        assert indexer.calls == [("post", [1, 2])]
        assert terms.sync_queue.ids() == [7]

    def test_bail_during_chunk_limit_keeps_growing(self, indexer):
        hooks = SyncHooks()
        hooks.add_flush_interceptor(lambda bail, manager, slug: True)
        manager = SyncManager("post", indexer, hooks=hooks, config=SyncConfig(chunk_limit=1))

        for object_id in range(4):
            manager.add_to_queue(object_id)

        assert indexer.call_count == 0
        assert len(manager.sync_queue) == 4

    def test_index_sync_on_chunk_limit(self, indexer):
        config = SyncConfig(chunk_limit=None)
        manager = SyncManager("post", indexer, config=config)
        manager.add_to_queue(1)
        manager.add_to_queue(2)

        assert manager.index_sync_on_chunk_limit() is True
        assert indexer.call_count == 0

        config.chunk_limit = 1
        assert manager.index_sync_on_chunk_limit() is True
        assert indexer.calls == [("post", [1, 2])]

    def test_negative_limit_rejected(self):
        with pytest.raises(ValueError):
            SyncConfig(chunk_limit=-1)


class TestLifecycleTriggers:
    """Test end-of-work and redirect flushing"""

    @pytest.fixture
    def indexer(self):
        return RecordingIndexer()

    def test_shutdown_flushes(self, indexer):
        work = UnitOfWork()
        manager = SyncManager("post", indexer, lifecycle=work)
        manager.add_to_queue(1)

        work.shutdown()

        assert indexer.calls == [("post", [1])]

    def test_shutdown_fires_once(self, indexer):
        work = UnitOfWork()
        callback = Mock()
        work.on_shutdown(callback)

        work.shutdown()
        work.shutdown()

        callback.assert_called_once_with()
        assert work.is_shut_down

    def test_context_manager_shuts_down_on_error(self, indexer):
        manager = None
        with pytest.raises(KeyError):
            with UnitOfWork() as work:
                manager = SyncManager("post", indexer, lifecycle=work)
                manager.add_to_queue(4)
                raise KeyError("boom")

        assert indexer.calls == [("post", [4])]

    def test_redirect_flushes_and_returns_location(self, indexer):
        work = UnitOfWork()
        manager = SyncManager("post", indexer, lifecycle=work)
        manager.add_to_queue(1)

        location = work.redirect("https://example.com/after-save")

        assert location == "https://example.com/after-save"
        assert indexer.calls == [("post", [1])]
        assert len(manager.sync_queue) == 0

    def test_redirect_with_empty_queue(self, indexer):
        manager = SyncManager("post", indexer)

        assert manager.index_sync_queue_on_redirect("/next") == "/next"
        assert indexer.call_count == 0

    def test_shutdown_after_redirect_does_not_resend(self, indexer):
        with UnitOfWork() as work:
            manager = SyncManager("post", indexer, lifecycle=work)
            manager.add_to_queue(1)
            work.redirect("/done")

        assert indexer.calls == [("post", [1])]

    def test_redirect_filters_are_chained(self):
        work = UnitOfWork()
        work.on_redirect(lambda location: location + "?a=1")
        work.on_redirect(lambda location: location + "&b=2")

        assert work.redirect("/x") == "/x?a=1&b=2"

    def test_every_manager_flushes_at_shutdown(self, indexer):
        with UnitOfWork() as work:
            posts = SyncManager("post", indexer, lifecycle=work)
            users = SyncManager("user", indexer, lifecycle=work)
            posts.add_to_queue(1)
            users.add_to_queue(2)

        assert indexer.calls == [("post", [1]), ("user", [2])]


class TestSharedHooksAcrossUnitsOfWork:
    """Test that a long-lived SyncHooks does not accumulate old managers"""

    @pytest.fixture
    def indexer(self):
        return RecordingIndexer()

    @pytest.fixture
    def hooks(self):
        return SyncHooks()

    def test_listener_counts_reset_after_each_shutdown(self, indexer, hooks):
        config = SyncConfig(chunk_limit=2)

        for request in range(3):
            with UnitOfWork(f"request-{request}") as work:
                manager = SyncManager("post", indexer, hooks=hooks, config=config, lifecycle=work)
                manager.add_to_queue(request)

                counts = hooks.get_listener_counts()
                assert counts["added"] == 1
                assert counts["insert_permissions_bypass"] == 1
                assert counts["delete_permissions_bypass"] == 1

            assert set(hooks.get_listener_counts().values()) == {0}
            assert manager.is_attached is False

        assert indexer.calls == [("post", [0]), ("post", [1]), ("post", [2])]

    def test_same_slug_managers_only_flush_own_queue(self, indexer, hooks):
        config = SyncConfig(chunk_limit=1)
        first = SyncManager("post", indexer, hooks=hooks, config=config)
        second = SyncManager("post", indexer, hooks=hooks, config=config)

        first.add_to_queue(1)
        second.add_to_queue(2)
        second.add_to_queue(3)

        assert indexer.calls == [("post", [2, 3])]
        assert first.sync_queue.ids() == [1]
        assert first.chunk_limit_trigger.flush_count == 0

    def test_detach_runs_even_when_shutdown_flush_fails(self, hooks):
        indexer = Mock(spec=BulkIndexer)
        indexer.bulk_index.side_effect = ConnectionError("index down")
        work = UnitOfWork()
        manager = SyncManager("post", indexer, hooks=hooks, config=SyncConfig(chunk_limit=10), lifecycle=work)
        manager.add_to_queue(1)

        with pytest.raises(ConnectionError):
            work.shutdown()

        assert set(hooks.get_listener_counts().values()) == {0}
        assert len(manager.sync_queue) == 0

    def test_detach_is_idempotent(self, indexer, hooks):
        manager = SyncManager("post", indexer, hooks=hooks, config=SyncConfig(chunk_limit=1))
        other = SyncManager("user", indexer, hooks=hooks, config=SyncConfig(chunk_limit=1))

        manager.detach()
        manager.detach()

        assert hooks.get_listener_counts()["added"] == 1
        assert hooks.filter_insert_permissions_bypass(False, 1, "user") is False
        other.add_to_queue(1)
        other.add_to_queue(2)
        assert indexer.calls == [("user", [1, 2])]
