"""
_backend.py
===========
Which kernel implementation a transform runs on.

  'python'        ``kernel.py_func``, the plain Python source of each numba
                  kernel; slow, but steppable in a debugger
  'cpu-parallel'  the compiled kernels, parallel over taxon rows where the
                  kernel allows it

This module only inspects the environment and never logs; callers decide
what to report.
"""

from typing import Dict, List, Tuple


# ============================================================================ #
# Detection
# ============================================================================ #


def check_numba_available() -> bool:
    """True if ``numba.njit`` can be imported."""
    try:
        from numba import njit  # noqa: F401
    except ImportError:
        return False
    return True


def get_available_backends() -> List[str]:
    """
    Backends usable in this process, worst first.

    Examples
    --------
    >>> get_available_backends()
    ['python', 'cpu-parallel']
    """
    if check_numba_available():
        return ["python", "cpu-parallel"]
    return ["python"]


def get_best_backend() -> str:
    """The last entry of ``get_available_backends()``."""
    return get_available_backends()[-1]


def resolve_backend(backend: str) -> str:
    """
    Turn a requested backend into one that can actually run.

    Parameters
    ----------
    backend : str
        'best', 'python' or 'cpu-parallel'.

    Raises
    ------
    ValueError
        For a name that is unknown or unusable here.

    Examples
    --------
    >>> resolve_backend('best')
    'cpu-parallel'
    >>> resolve_backend('cuda')
    Traceback (most recent call last):
    ...
    ValueError: Backend 'cuda' not available. Available backends: python, cpu-parallel
    """
    available = get_available_backends()
    if backend == "best":
        return available[-1]
    if backend in available:
        return backend
    raise ValueError(
        f"Backend '{backend}' not available. "
        f"Available backends: {', '.join(available)}"
    )


# ============================================================================ #
# Kernels
# ============================================================================ #


def import_cpu_kernels() -> Tuple[object, object, object, object]:
    """
    Load the kernels lazily so importing the package does not compile them.

    Returns
    -------
    tuple
        (frequency_kernel, hamming_kernel, pscore_kernel, pindex_kernel)
    """
    from splitscore import _cpu_kernels as k

    return (
        k._pair_frequencies_njit,
        k._hamming_matrix_njit,
        k._quartet_pscore_njit,
        k._pindex_njit,
    )


def select_kernel(kernel, backend: str):
    """
    Callable for ``kernel`` on an already resolved backend.

    Both backends execute the same source: 'python' calls the function numba
    compiled from.
    """
    if backend == "cpu-parallel":
        return kernel
    if backend == "python":
        return kernel.py_func
    raise RuntimeError(f"Internal error: unhandled backend {backend!r}")


def get_backend_info() -> Dict[str, object]:
    """
    Snapshot of the backend situation, for bug reports.

    Returns
    -------
    dict
        'numba_available', 'numba_version', 'backends', 'best_backend',
        'num_threads'.

    Examples
    --------
    >>> get_backend_info()['best_backend']
    'cpu-parallel'
    """
    import numba

    backends = get_available_backends()
    return {
        "numba_available": check_numba_available(),
        "numba_version": numba.__version__,
        "backends": backends,
        "best_backend": backends[-1],
        "num_threads": numba.get_num_threads(),
    }
