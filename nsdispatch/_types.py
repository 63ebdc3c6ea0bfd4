"""Shared type definitions for nsdispatch.

All type aliases use PEP 695 ``type`` statement syntax.
"""

from collections.abc import Awaitable, Callable, MutableMapping
from typing import Any

type Parameters = MutableMapping[str, Any]
"""Parameter bag threaded through one trigger call.

Always holds the reserved keys ``halt`` and ``return``.
"""

type Handler = Callable[[str, str, Parameters], Any]
"""Synchronous handler: ``(namespace, event, parameters) -> value``.

A ``None`` result leaves ``parameters["return"]`` untouched.
"""

type AsyncHandler = Callable[[str, str, Parameters], Awaitable[Any] | Any]
"""Handler accepted by ``AsyncDispatcher``; awaitable results are awaited."""
