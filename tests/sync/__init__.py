"""
Test suite for the deferred synchronization system.

Covers the sync queue, hook registry, flush triggers, sync manager,
permission bypass policy and indexable registry.
"""
