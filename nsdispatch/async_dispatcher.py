import inspect
from collections.abc import Mapping
from typing import Any

from loguru import logger

from nsdispatch._types import AsyncHandler
from nsdispatch.base_dispatcher import BaseDispatcher

log = logger.bind(source=__name__)


class AsyncDispatcher(BaseDispatcher[AsyncHandler]):
    """Asynchronous dispatcher.

    Same ordering, return and halt rules as :class:`Dispatcher`, for
    handlers that are coroutine functions.  Handlers still run strictly
    one after another: each awaitable result is awaited before the next
    handler starts.  Plain synchronous handlers are accepted too.
    """

    async def trigger(
        self,
        namespace: str,
        event: str,
        parameters: Mapping[str, Any] | None = None,
    ) -> Any:
        """Asynchronously dispatch (namespace, event).

        Warning:
            Handlers can recursively await trigger(). The dispatcher does not
            detect cycles, so A→B→A chains end in RecursionError.

        Args:
            namespace: Concrete namespace.
            event: Concrete event.
            parameters: Parameter bag shared by all handlers; a mutable
                mapping is used in place, a read-only one is copied.

        Returns:
            The final value of ``parameters["return"]``.

        Raises:
            TypeError: If parameters is not a mapping.
            Exception: Whatever a handler raises, unchanged.
        """
        params = self._prepare_parameters(parameters)
        run_list = self._registry.match(namespace, event)
        log.debug("Trigger {}/{} ({} handler(s))", namespace, event, len(run_list))
        for priority, registration in run_list:
            result = registration.handler(namespace, event, params)
            if inspect.isawaitable(result):
                result = await result
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
