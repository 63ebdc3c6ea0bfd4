"""Synchronous dispatcher for (namespace, event) handling."""

from collections.abc import Mapping
from typing import Any

from loguru import logger

from nsdispatch._types import Handler
from nsdispatch.base_dispatcher import BaseDispatcher

log = logger.bind(source=__name__)


class Dispatcher(BaseDispatcher[Handler]):
    """Synchronous dispatcher.

    Executes handlers one at a time on the calling thread, in merged
    priority order.  Recursive trigger() calls execute directly (no queue).
    """

    def trigger(
        self,
        namespace: str,
        event: str,
        parameters: Mapping[str, Any] | None = None,
    ) -> Any:
        """Synchronously dispatch (namespace, event).

        Each matching handler is called as ``handler(namespace, event,
        parameters)``.  A non-None result is stored in
        ``parameters["return"]``; if a handler sets ``parameters["halt"]``
        the remaining handlers are skipped.

        Handlers registered while this call is running are not picked up
        until the next trigger.

        Warning:
            Handlers can recursively call trigger(). The dispatcher does not
            detect cycles. Users must avoid infinite recursion chains
            (e.g., A→B→A), otherwise Python's RecursionError will be raised.

        Args:
            namespace: Concrete namespace.
            event: Concrete event.
            parameters: Parameter bag shared by all handlers; a mutable
                mapping is used in place, a read-only one is copied.

        Returns:
            The final value of ``parameters["return"]``, None if no handler
            set one.

        Raises:
            TypeError: If parameters is not a mapping.
            Exception: Whatever a handler raises; remaining handlers are
                skipped and the bag keeps the changes made so far.
        """
        params = self._prepare_parameters(parameters)
        run_list = self._registry.match(namespace, event)
        log.debug("Trigger {}/{} ({} handler(s))", namespace, event, len(run_list))
        for priority, registration in run_list:
            result = registration.handler(namespace, event, params)
            if self._absorb_result(params, result):
                log.debug(
                    "Trigger {}/{} halted by {} at priority {}",
                    namespace,
                    event,
                    registration.name,
                    priority,
                )
                break
        return params.get("return")
