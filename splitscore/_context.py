"""
_context.py
===========
Scoped changes to logging, warnings and backend choice.

  suppress_logger(name, level)   raise one logger's level
  quiet(level)                   raise the level of the whole package
  suppress_warnings(category)    ignore Python warnings
  use_backend(backend)           pin every transform to one backend
  silent_benchmark(backend)      quiet + use_backend + suppress_warnings

Whatever is changed on entry is put back on exit, also when the block
raises.
"""

import logging
import warnings
from contextlib import contextmanager
from typing import Optional, Type

from splitscore._backend import get_best_backend, resolve_backend


logger = logging.getLogger(__name__)

# set by use_backend, read by effective_backend
_backend_override = None


# ============================================================================ #
# Logging
# ============================================================================ #


@contextmanager
def suppress_logger(logger_name: str, level: int = logging.CRITICAL):
    """
    Set the level of one logger for the duration of the block.

    Examples
    --------
    >>> with suppress_logger('splitscore._splits', logging.WARNING):
    ...     splits = DNA2Splits().apply(chars)
    """
    target = logging.getLogger(logger_name)
    saved = target.level
    target.setLevel(level)
    try:
        yield
    finally:
        target.setLevel(saved)


@contextmanager
def quiet(level: int = logging.CRITICAL):
    """
    Silence splitscore below ``level``.

    Module loggers are children of 'splitscore', so one level change covers
    the package.

    Examples
    --------
    >>> with quiet():
    ...     distances = NucleotideDistance().apply(chars)
    >>> with quiet(logging.WARNING):
    ...     network = MinSpanningNetwork().apply(chars)
    """
    with suppress_logger("splitscore", level):
        yield


# ============================================================================ #
# Warnings
# ============================================================================ #


@contextmanager
def suppress_warnings(category: Optional[Type[Warning]] = None):
    """
    Ignore warnings of ``category`` (all warnings when None).

    Examples
    --------
    >>> from numba.core.errors import NumbaPerformanceWarning
    >>> with suppress_warnings(NumbaPerformanceWarning):
    ...     distances = HammingDistance().apply(chars)
    """
    with warnings.catch_warnings():
        if category is not None:
            warnings.filterwarnings("ignore", category=category)
        else:
            warnings.simplefilter("ignore")
        yield


# ============================================================================ #
# Backends
# ============================================================================ #


@contextmanager
def use_backend(backend: str):
    """
    Run every transform inside the block on ``backend``.

    Parameters
    ----------
    backend : str
        'python', 'cpu-parallel' or 'best'.

    Raises
    ------
    ValueError
        If ``backend`` cannot run here.

    Examples
    --------
    >>> with use_backend('python'):
    ...     slow = HammingDistance().apply(chars)
    >>> fast = HammingDistance().apply(chars, backend='cpu-parallel')
    >>> np.allclose(slow.matrix, fast.matrix)
    True

    Notes
    -----
    The override is a module global, so it is not thread-safe. Threads that
    need different backends should pass ``backend=`` to ``apply()``.
    """
    global _backend_override

    if backend != "best":
        resolve_backend(backend)

    saved = _backend_override
    _backend_override = backend
    try:
        yield
    finally:
        _backend_override = saved


def get_backend_override() -> Optional[str]:
    """
    Backend pinned by the innermost active ``use_backend``, or None.

    Examples
    --------
    >>> with use_backend('cpu-parallel'):
    ...     print(get_backend_override())
    cpu-parallel
    """
    return _backend_override


def effective_backend(backend: str, operation: str) -> str:
    """
    Backend a transform will actually use.

    A ``use_backend`` override beats the ``backend`` argument. A backend
    that cannot run is logged and replaced by the best one available.

    Parameters
    ----------
    backend : str
        Backend requested by the caller.
    operation : str
        Transform name for the log record.
    """
    requested = _backend_override if _backend_override is not None else backend
    try:
        resolved = resolve_backend(requested)
    except ValueError as e:
        logger.warning(str(e))
        resolved = get_best_backend()
    logger.info(f"{operation}(backend={resolved!r})")
    return resolved


# ============================================================================ #
# Combined
# ============================================================================ #


@contextmanager
def silent_benchmark(backend: str = "best"):
    """
    Quiet logs, no warnings, fixed backend: for timing runs.

    Examples
    --------
    >>> for backend in get_available_backends():
    ...     with silent_benchmark(backend):
    ...         start = time.time()
    ...         HammingDistance().apply(chars)
    ...         print(f"{backend}: {time.time() - start:.3f}s")
    """
    with quiet(), use_backend(backend), suppress_warnings():
        yield
