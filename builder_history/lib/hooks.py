"""Action/filter hook registry used to wire the builder into host lifecycle events.

Actions run callbacks for their side effects; filters thread a value through
each callback in turn and return the result.

Usage:
    from builder_history.lib.hooks import HookRegistry, REVISION_RESTORED

    registry = HookRegistry()
    registry.add_action(REVISION_RESTORED, manager.restore_revision)

    await registry.do_action(REVISION_RESTORED, document.id, revision.id)
    settings = await registry.apply_filters(EDITOR_LOCALIZE_SETTINGS, {}, document.id)

A module-level ``hooks`` registry exists for plugins that want process-wide
subscriptions; request-scoped code should receive its registry explicitly.
"""

import asyncio
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Callable, TypeVar

from builder_history.lib import observability

T = TypeVar("T")


@dataclass(order=True)
class HookHandler:
    """A registered hook handler with priority."""

    priority: int
    callback: Callable = field(compare=False)

    async def call(self, *args: Any, **kwargs: Any) -> Any:
        """Call the handler, awaiting the result for async callbacks."""
        result = self.callback(*args, **kwargs)
        if asyncio.iscoroutine(result):
            return await result
        return result


class HookRegistry:
    """Registry of action and filter subscriptions."""

    def __init__(self) -> None:
        self._actions: dict[str, list[HookHandler]] = defaultdict(list)
        self._filters: dict[str, list[HookHandler]] = defaultdict(list)

    @staticmethod
    def _subscribe(
        table: dict[str, list[HookHandler]],
        hook_name: str,
        callback: Callable[..., Any],
        priority: int,
    ) -> bool:
        handlers = table[hook_name]
        for handler in handlers:
            # Bound methods compare equal when they wrap the same function and instance.
            if handler.callback == callback and handler.priority == priority:
                return False
        handlers.append(HookHandler(priority=priority, callback=callback))
        handlers.sort()
        return True

    @staticmethod
    def _unsubscribe(
        table: dict[str, list[HookHandler]],
        hook_name: str,
        callback: Callable[..., Any],
    ) -> bool:
        handlers = table.get(hook_name, [])
        for i, handler in enumerate(handlers):
            if handler.callback == callback:
                handlers.pop(i)
                return True
        return False

    def add_action(
        self,
        hook_name: str,
        callback: Callable[..., Any],
        priority: int = 10,
    ) -> bool:
        """Register an action callback.

        Args:
            hook_name: Name of the action hook
            callback: Function to call when the action fires
            priority: Lower numbers execute first (default: 10)

        Returns:
            False if the callback was already registered at that priority
        """
        return self._subscribe(self._actions, hook_name, callback, priority)

    def add_filter(
        self,
        hook_name: str,
        callback: Callable[..., Any],
        priority: int = 10,
    ) -> bool:
        """Register a filter callback.

        Args:
            hook_name: Name of the filter hook
            callback: Function receiving the value (plus extra args) and returning it
            priority: Lower numbers execute first (default: 10)

        Returns:
            False if the callback was already registered at that priority
        """
        return self._subscribe(self._filters, hook_name, callback, priority)

    def remove_action(self, hook_name: str, callback: Callable[..., Any]) -> bool:
        """Remove an action callback. Returns True if it was registered."""
        return self._unsubscribe(self._actions, hook_name, callback)

    def remove_filter(self, hook_name: str, callback: Callable[..., Any]) -> bool:
        """Remove a filter callback. Returns True if it was registered."""
        return self._unsubscribe(self._filters, hook_name, callback)

    def has_action(self, hook_name: str, callback: Callable[..., Any] | None = None) -> bool:
        """Check if an action hook has handlers, or a specific callback when given."""
        handlers = self._actions.get(hook_name, [])
        if callback is None:
            return bool(handlers)
        return any(handler.callback == callback for handler in handlers)

    def has_filter(self, hook_name: str, callback: Callable[..., Any] | None = None) -> bool:
        """Check if a filter hook has handlers, or a specific callback when given."""
        handlers = self._filters.get(hook_name, [])
        if callback is None:
            return bool(handlers)
        return any(handler.callback == callback for handler in handlers)

    async def do_action(self, hook_name: str, *args: Any, **kwargs: Any) -> None:
        """Execute all registered action callbacks in priority order."""
        with observability.span(f"hook.action:{hook_name}", hook_name=hook_name):
            for handler in list(self._actions.get(hook_name, [])):
                await handler.call(*args, **kwargs)

    async def apply_filters(self, hook_name: str, value: T, *args: Any, **kwargs: Any) -> T:
        """Pass a value through all registered filter callbacks.

        Args:
            hook_name: Name of the filter hook
            value: Initial value to filter
            *args: Additional positional arguments passed to every callback
            **kwargs: Keyword arguments passed to every callback

        Returns:
            The value returned by the last callback, or ``value`` if none are registered
        """
        with observability.span(f"hook.filter:{hook_name}", hook_name=hook_name):
            for handler in list(self._filters.get(hook_name, [])):
                value = await handler.call(value, *args, **kwargs)
            return value

    def clear(self) -> None:
        """Clear all registered hooks. Useful for testing."""
        self._actions.clear()
        self._filters.clear()


# Process-wide registry for plugin subscriptions
hooks = HookRegistry()


# Host lifecycle actions
INIT = "init"
REVISION_CREATED = "revision_created"
REVISION_RESTORED = "revision_restored"
BUILDER_BEFORE_SAVE = "builder_before_save"
BUILDER_AFTER_SAVE = "builder_after_save"

# Host filters
REVISION_POST_HAS_CHANGED = "revision_post_has_changed"
EDITOR_LOCALIZE_SETTINGS = "editor_localize_settings"
BUILDER_SAVE_RETURN_DATA = "builder_save_return_data"

# Request endpoint handlers are filters named "ajax_<action>"
AJAX_PREFIX = "ajax_"
AJAX_GET_REVISION_DATA = "ajax_get_revision_data"
AJAX_DELETE_REVISION = "ajax_delete_revision"
