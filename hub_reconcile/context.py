"""Tracing of nested reconcile steps for debug logging."""

import contextvars
from contextlib import contextmanager
import logging
from time import perf_counter
from typing import Generator


_LOGGER = logging.getLogger(__name__)

__all__ = ["reconcile_step", "current_steps"]


_steps: contextvars.ContextVar[tuple[str, ...]] = contextvars.ContextVar(
    "reconcile_steps", default=()
)


@contextmanager
def reconcile_step(name: str) -> Generator[None, None, None]:
    """Record a named reconcile step for the duration of the block.

    Steps nest per asyncio task, so concurrent reconciliations of different
    keys each log their own chain, e.g. `ensure_view(cluster1) > get`.
    """
    chain = _steps.get() + (name,)
    token = _steps.set(chain)
    label = " > ".join(chain)
    start = perf_counter()
    _LOGGER.debug("[Step] > %s", label)
    try:
        yield
    except BaseException as err:
        _LOGGER.debug(
            "[Step] ! %s raised %s (%0.3fs)",
            label,
            type(err).__name__,
            perf_counter() - start,
        )
        raise
    else:
        _LOGGER.debug("[Step] < %s (%0.3fs)", label, perf_counter() - start)
    finally:
        _steps.reset(token)


def current_steps() -> tuple[str, ...]:
    """Return the chain of reconcile steps currently executing."""
    return _steps.get()
