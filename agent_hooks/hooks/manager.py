"""
Hook Manager: the handler registry for the dispatcher.

Each event kind is bound to exactly one handler. The HookManager checks
the bindings at startup and invokes the bound handler at dispatch time.
"""

from typing import Callable, Optional, Dict, Any, Union

from ..errors import InvalidDecisionError, RegistryError
from ..logger import logger
from .types import EventPayload, HookEvent, HookResult


# Type alias for hook handlers
HookHandler = Callable[[EventPayload], Optional[Union[HookResult, Dict[str, Any]]]]


class HookManager:
    """
    Registry mapping each HookEvent to its single handler.

    Example:
        hooks = HookManager()

        @hooks.on(HookEvent.PreToolUse)
        def check_command(event):
            if event.tool_name == "Bash":
                ...
            return HookResult.cont()

        hooks.verify()  # raises RegistryError if any kind is unbound
        result = hooks.dispatch(event)
    """

    def __init__(self):
        """Initialize the hook manager with no bindings."""
        self._hooks: Dict[HookEvent, Optional[HookHandler]] = {
            event: None for event in HookEvent
        }

    def on(self, event: HookEvent) -> Callable[[HookHandler], HookHandler]:
        """
        Decorator to bind a handler to an event kind.

        Args:
            event: The hook event to handle

        Returns:
            Decorator function
        """
        def decorator(handler: HookHandler) -> HookHandler:
            self.register(event, handler)
            return handler
        return decorator

    def register(self, event: HookEvent, handler: HookHandler) -> None:
        """
        Bind a handler to an event kind.

        Args:
            event: The hook event to handle
            handler: Callable taking the typed payload and returning a HookResult

        Raises:
            RegistryError: If the kind is invalid or already has a handler
        """
        if event not in self._hooks:
            raise RegistryError(f"Invalid hook event: {event}")
        if self._hooks[event] is not None:
            raise RegistryError(
                f"{event.value} already bound to {self._hooks[event].__name__}"
            )
        self._hooks[event] = handler
        logger.debug(f"[hooks] Registered handler for {event.value}: {handler.__name__}")

    def unregister(self, event: HookEvent) -> Optional[HookHandler]:
        """
        Remove the handler bound to an event kind.

        Returns:
            The removed handler, or None if the kind was unbound
        """
        handler = self._hooks[event]
        self._hooks[event] = None
        return handler

    def clear(self) -> None:
        """Remove every binding."""
        for e in HookEvent:
            self._hooks[e] = None

    def has_hook(self, event: HookEvent) -> bool:
        """Check if a handler is bound for an event."""
        return self._hooks[event] is not None

    def verify(self) -> None:
        """
        Check that every event kind has a handler.

        Raises:
            RegistryError: Listing the kinds with no handler
        """
        unbound = [e.value for e in HookEvent if self._hooks[e] is None]
        if unbound:
            raise RegistryError(f"No handler bound for: {', '.join(unbound)}")

    def dispatch(self, event: EventPayload) -> HookResult:
        """
        Invoke the handler bound to the event's kind.

        A handler that raises or returns an invalid decision is contained:
        the fault is logged and the result degrades to "continue".

        Args:
            event: The decoded payload

        Returns:
            The handler's validated HookResult, or HookResult.cont()

        Raises:
            RegistryError: If no handler is bound for the event's kind
        """
        handler = self._hooks.get(event.kind)
        if handler is None:
            raise RegistryError(f"No handler bound for {event.kind.value}")

        try:
            result = self._execute_handler(handler, event)
            result.validate(event.kind)
        except Exception as e:
            logger.error(
                f"[hooks] Handler {handler.__name__} failed for {event.kind.value}, "
                f"continuing: {type(e).__name__}: {e}"
            )
            return HookResult.cont()

        return result

    def _execute_handler(self, handler: HookHandler, event: EventPayload) -> HookResult:
        """Execute a single hook handler and normalize its return value."""
        result = handler(event)

        if result is None:
            return HookResult.cont()
        # Handle dict return for convenience
        if isinstance(result, dict):
            return HookResult.from_dict(result)
        if not isinstance(result, HookResult):
            raise InvalidDecisionError(
                f"Handler returned {type(result).__name__}, expected HookResult"
            )
        return result

    def list_hooks(self) -> Dict[str, str]:
        """
        List the bound handlers.

        Returns:
            Dictionary of event name -> handler name, for bound kinds only
        """
        return {
            e.value: handler.__name__
            for e, handler in self._hooks.items()
            if handler is not None
        }
