from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping, MutableMapping
from typing import Any

from loguru import logger

from nsdispatch._types import Parameters
from nsdispatch.exceptions import InvalidHandlerError
from nsdispatch.registry import Registration, Registry

log = logger.bind(source=__name__)

DEFAULT_PRIORITY = 500


class BaseDispatcher[H](ABC):
    """Abstract base class for (namespace, event) dispatchers.

    Provides common functionality for both sync and async dispatchers:
    - Handler registration
    - Exact-key existence checks and run-list introspection
    - Parameter bag preparation

    Subclasses must implement:
    - trigger() - Dispatching logic
    """

    _registry: Registry[H]  # Registry for managing handlers
    default_priority: int  # Priority used when register() is given none

    def __init__(self, *, default_priority: int = DEFAULT_PRIORITY) -> None:
        """Initialize dispatcher.

        Args:
            default_priority: Priority for registrations that do not name one.
        """
        self._registry = Registry[H]()
        self.default_priority = default_priority

    def on[F: Callable[..., Any]](
        self,
        namespace: str,
        event: str,
        *,
        priority: int | None = None,
    ) -> Callable[[F], F]:
        """Decorator to register a function as handler.

        Args:
            namespace: Namespace pattern; ``*`` and ``all`` are wildcards.
            event: Event pattern; ``*`` and ``all`` are wildcards.
            priority: Execution order (lower runs first).

        Returns:
            Decorator function that returns the original function unchanged.

        Raises:
            InvalidHandlerError: If the decorated object is not callable.
        """

        def decorator(func: F) -> F:
            self.register(namespace, event, func, priority=priority)  # type: ignore[arg-type]
            return func

        return decorator

    def register(
        self,
        namespace: str,
        event: str,
        handler: H,
        priority: int | None = None,
    ) -> bool:
        """Register handler via method call.

        A priority already taken in the same (namespace, event) bucket is
        bumped to the next free value, so among equal requests the first
        registered runs first.

        Args:
            namespace: Namespace pattern; ``*`` and ``all`` are wildcards.
            event: Event pattern; ``*`` and ``all`` are wildcards.
            handler: Called as ``handler(namespace, event, parameters)``.
            priority: Execution order (lower runs first); defaults to
                :attr:`default_priority`.

        Returns:
            True.

        Post:
            Handler stored in its bucket at a collision-free priority.

        Raises:
            InvalidHandlerError: If handler is not callable.  The registry
                is left unchanged.
        """
        if not callable(handler):
            raise InvalidHandlerError(
                f"handler {handler!r} for {namespace}/{event} is not callable"
            )
        requested = self.default_priority if priority is None else priority
        registration = self._registry.add(namespace, event, handler, requested)
        log.debug(
            "Registered {} on {}/{} at priority {} (requested {})",
            registration.name,
            namespace,
            event,
            registration.priority,
            requested,
        )
        return True

    def exists(self, namespace: str, event: str) -> bool:
        """Return whether something was registered under exactly this pair.

        This is a literal lookup of the strings given to ``register()``,
        not a wildcard match: ``exists("obj:*", "saved")`` is True after
        ``register("obj:*", "saved", ...)`` but ``exists("obj:blog",
        "saved")`` is not, even though ``trigger("obj:blog", "saved")``
        would run that handler.

        Args:
            namespace: Namespace string as passed to ``register()``.
            event: Event string as passed to ``register()``.

        Returns:
            True if a handler was registered with these exact strings.
        """
        return self._registry.contains(namespace, event)

    def plan(self, namespace: str, event: str) -> list[tuple[int, Registration[H]]]:
        """Return the run list a trigger of (namespace, event) would execute.

        Args:
            namespace: Concrete namespace.
            event: Concrete event.

        Returns:
            (merged priority, registration) pairs in execution order.
        """
        return self._registry.match(namespace, event)

    @abstractmethod
    def trigger(
        self,
        namespace: str,
        event: str,
        parameters: Mapping[str, Any] | None = None,
    ) -> Any:
        """Dispatch (namespace, event) to every matching handler.

        Args:
            namespace: Concrete namespace.
            event: Concrete event.
            parameters: Parameter bag shared by all handlers.

        Returns:
            The final value of ``parameters["return"]``.

        Raises:
            Exception: Whatever a handler raises, unchanged.
            RecursionError: If handlers trigger each other without end.
        """
        raise NotImplementedError

    @staticmethod
    def _prepare_parameters(parameters: Mapping[str, Any] | None) -> Parameters:
        """Fill the reserved ``halt`` and ``return`` keys into a parameter bag.

        A mutable mapping is used in place, so changes made by handlers
        remain visible to the caller even if ``trigger()`` raises.  A
        read-only mapping is copied into a fresh dict.  Either way,
        caller-supplied values for the reserved keys win over the defaults.

        Args:
            parameters: Caller's mapping, or None for a fresh bag.

        Returns:
            The parameter bag to thread through the handlers.

        Raises:
            TypeError: If parameters is not a mapping.
        """
        if parameters is None:
            return {"halt": False, "return": None}
        if isinstance(parameters, MutableMapping):
            parameters.setdefault("halt", False)
            parameters.setdefault("return", None)
            return parameters
        if isinstance(parameters, Mapping):
            return {"halt": False, "return": None, **parameters}
        raise TypeError(
            f"parameters must be a mapping, got {type(parameters).__name__}"
        )

    @staticmethod
    def _absorb_result(parameters: Parameters, result: Any) -> bool:
        """Record a handler result and report whether the chain must stop.

        Args:
            parameters: The active parameter bag.
            result: Value returned by the handler; None leaves
                ``parameters["return"]`` as it is.

        Returns:
            True if ``parameters["halt"]`` is truthy.
        """
        if result is not None:
            parameters["return"] = result
        return bool(parameters.get("halt"))
