"""
Hard wall-clock bound for blocking calls to remote services.

Socket timeouts only bound each individual read, so a peer that trickles
bytes can hold a call open indefinitely. call_with_deadline runs the call on
a daemon worker thread and stops waiting once the deadline passes.

The worker is not interrupted: it runs until the underlying call returns on
its own, and its result or exception is then discarded. Being a daemon
thread it never delays interpreter exit.
"""

import threading
from concurrent.futures import Future, TimeoutError as FutureTimeout
from typing import Any, Callable, Optional

from .exceptions import RemoteFetchError


def call_with_deadline(
    func: Callable[..., Any],
    timeout: Optional[float],
    *args: Any,
    description: str = "Remote call",
) -> Any:
    """
    Call func(*args) and wait at most `timeout` seconds for it.

    Args:
        func: Blocking callable
        timeout: Seconds to wait, None to wait indefinitely in the calling thread
        description: Used in the timeout message

    Returns:
        Whatever func returns

    Raises:
        RemoteFetchError: With kind TIMEOUT when the deadline passes
        Exception: Whatever func raises before the deadline
    """
    if timeout is None:
        return func(*args)

    future: Future = Future()

    def worker() -> None:
        if not future.set_running_or_notify_cancel():
            return
        try:
            future.set_result(func(*args))
        except BaseException as e:
            future.set_exception(e)

    threading.Thread(target=worker, name="deadline-call", daemon=True).start()
    try:
        return future.result(timeout=timeout)
    except FutureTimeout as e:
        raise RemoteFetchError(
            RemoteFetchError.TIMEOUT, f"{description} did not complete within {timeout}s"
        ) from e
