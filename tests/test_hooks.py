"""Tests for the hook/filter registry."""

import asyncio

import pytest

from builder_history.lib.hooks import HookRegistry


class Listener:
    def __init__(self):
        self.calls = []

    def on_event(self, *args):
        self.calls.append(args)


class TestHookRegistry:
    """Test the HookRegistry class."""

    def test_add_action_registers_handler(self, registry):
        """Test that add_action registers a handler."""
        def my_handler():
            pass

        assert registry.add_action("test_action", my_handler) is True
        assert registry.has_action("test_action")
        assert registry.has_action("test_action", my_handler)

    def test_add_filter_registers_handler(self, registry):
        """Test that add_filter registers a handler."""
        def my_filter(value):
            return value

        registry.add_filter("test_filter", my_filter)
        assert registry.has_filter("test_filter", my_filter)
        assert not registry.has_filter("test_filter", lambda value: value)

    def test_action_priority_ordering(self, registry):
        """Lower priorities run first."""
        call_order = []

        registry.add_action("test", lambda: call_order.append("late"), priority=9999)
        registry.add_action("test", lambda: call_order.append("early"), priority=5)
        registry.add_action("test", lambda: call_order.append("default"))

        asyncio.run(registry.do_action("test"))

        assert call_order == ["early", "default", "late"]

    def test_equal_priority_keeps_registration_order(self, registry):
        """Handlers with equal priority run in the order they were added."""
        call_order = []

        registry.add_action("test", lambda: call_order.append("first"))
        registry.add_action("test", lambda: call_order.append("second"))

        asyncio.run(registry.do_action("test"))

        assert call_order == ["first", "second"]

    def test_duplicate_subscription_is_ignored(self, registry):
        """Test that subscribing the same callback twice is a no-op."""
        listener = Listener()

        assert registry.add_action("test", listener.on_event) is True
        assert registry.add_action("test", listener.on_event) is False

        asyncio.run(registry.do_action("test", 1))

        assert listener.calls == [(1,)]

    def test_same_method_on_different_instances(self, registry):
        """Bound methods of different instances are separate subscriptions."""
        first, second = Listener(), Listener()

        registry.add_action("test", first.on_event)
        registry.add_action("test", second.on_event)

        asyncio.run(registry.do_action("test"))

        assert first.calls == [()]
        assert second.calls == [()]

    @pytest.mark.asyncio
    async def test_apply_filters_chains_values_with_extra_args(self, registry):
        """Test that filters chain the value and receive the extra arguments."""
        def double(value, factor):
            return value * factor

        async def add_ten(value, factor):
            return value + 10

        registry.add_filter("test", double, priority=10)
        registry.add_filter("test", add_ten, priority=20)

        assert await registry.apply_filters("test", 5, 3) == 25

    @pytest.mark.asyncio
    async def test_async_action_handler(self, registry):
        """Async callbacks are awaited."""
        results = []

        async def async_handler(value):
            results.append(value)

        registry.add_action("test", async_handler)
        await registry.do_action("test", "async_value")

        assert results == ["async_value"]

    @pytest.mark.asyncio
    async def test_empty_hook_returns_original_value(self, registry):
        """A filter with no handlers returns the value unchanged."""
        assert await registry.apply_filters("nonexistent", "original") == "original"

    @pytest.mark.asyncio
    async def test_handler_added_during_action_runs_next_time(self, registry):
        """Handlers added while a hook runs only take part in later runs."""
        calls = []

        def late():
            calls.append("late")

        def subscribing():
            calls.append("subscribing")
            registry.add_action("test", late)

        registry.add_action("test", subscribing)

        await registry.do_action("test")
        assert calls == ["subscribing"]

        await registry.do_action("test")
        assert calls == ["subscribing", "subscribing", "late"]

    def test_remove_action(self, registry):
        """Test removing an action handler."""
        listener = Listener()
        registry.add_action("test", listener.on_event)

        assert registry.remove_action("test", listener.on_event) is True
        assert not registry.has_action("test")

    def test_remove_filter(self, registry):
        """Test removing a filter handler."""
        def my_filter(value):
            return value

        registry.add_filter("test", my_filter)

        assert registry.remove_filter("test", my_filter) is True
        assert not registry.has_filter("test")

    def test_remove_nonexistent_returns_false(self, registry):
        """Removing an unknown handler returns False."""
        assert registry.remove_action("nonexistent", lambda: None) is False

    def test_clear_removes_all_hooks(self):
        """Test that clear empties the registry."""
        registry = HookRegistry()
        registry.add_action("action1", lambda: None)
        registry.add_filter("filter1", lambda x: x)

        registry.clear()

        assert not registry.has_action("action1")
        assert not registry.has_filter("filter1")
