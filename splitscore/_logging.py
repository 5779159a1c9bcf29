"""
_logging.py
===========
Log message helpers for splitscore.

Nothing here computes anything: every function receives numbers that a
transform already collected and turns them into log records. Transforms
count their problems (undefined distances, skipped columns, ...) while
they run and report them here once, so a matrix with many problems yields
one consolidated message instead of one per entry.
"""

import logging
from typing import List, Sequence, Tuple


logger = logging.getLogger(__name__)


# ============================================================================ #
# Import-time diagnostics
# ============================================================================ #


def log_optimization_status() -> None:
    """
    Describe the machine and the numba toolchain at INFO level.

    Emitted once when the package is imported: interpreter and platform,
    usable cores, memory (only if psutil is installed), numba/llvmlite
    versions and the numba thread pool.
    """
    import os
    import platform

    import numba

    logger.info(
        "Python %s on %s/%s with %d cores",
        platform.python_version(),
        platform.system(),
        platform.machine(),
        os.cpu_count() or 1,
    )

    try:
        import psutil
    except ImportError:
        psutil = None
    if psutil is not None:
        vm = psutil.virtual_memory()
        logger.info(
            "Memory: %.1f of %.1f GB available", vm.available / 2**30, vm.total / 2**30
        )

    try:
        import llvmlite

        llvm_version = llvmlite.__version__
    except (ImportError, AttributeError):
        llvm_version = "unknown"
    logger.info("numba %s (llvmlite %s)", numba.__version__, llvm_version)

    # the threading layer is only chosen after a parallel kernel ran
    try:
        layer = numba.threading_layer()
    except ValueError:
        layer = "not yet selected"
    logger.info("numba threads: %d, threading layer: %s", numba.get_num_threads(), layer)


def install_numba_warning_filter() -> None:
    """
    Send NumbaPerformanceWarning through the splitscore logger.

    numba reports performance problems with ``warnings.warn``. Those records
    are diverted to a WARNING on this module's logger; every other warning
    keeps its normal route.
    """
    import warnings

    from numba.core.errors import NumbaPerformanceWarning

    previous = warnings.showwarning

    def showwarning(message, category, filename, lineno, file=None, line=None):
        if not issubclass(category, NumbaPerformanceWarning):
            previous(message, category, filename, lineno, file, line)
            return
        logger.warning("numba performance warning at %s:%d: %s", filename, lineno, message)

    warnings.showwarning = showwarning


def log_backend_availability(backends_available: List[str]) -> None:
    """
    List the kernel backends and the one ``backend='best'`` resolves to.

    Parameters
    ----------
    backends_available : list of str
        Backends in preference order, best last.
    """
    descriptions = {
        "python": "uncompiled kernels (kernel.py_func)",
        "cpu-parallel": "numba-compiled kernels, parallel over taxa",
    }
    logger.info("Available backends: %s", ", ".join(backends_available))
    for name in backends_available:
        logger.info("  %s: %s", name, descriptions.get(name, ""))
    logger.info("backend='best' will use: %s", backends_available[-1])


# ============================================================================ #
# Distance Logging (called once per computed matrix)
# ============================================================================ #


def log_undefined_distances(
    undefined_pairs: Sequence[Tuple[int, int]],
    n_taxa: int,
    fallback: float,
    reason: str = "saturated or undefined",
) -> None:
    """
    Emit a consolidated warning for distances replaced by a fallback value.

    Parameters
    ----------
    undefined_pairs : sequence of (int, int)
        1-based taxon pairs whose distance could not be computed.
    n_taxa : int
        Number of taxa in the matrix.
    fallback : float
        Value written in place of the undefined distances.
    reason : str
        Short description used in the message.
    """
    n_undefined = len(undefined_pairs)
    if n_undefined == 0:
        return

    if n_undefined == 1:
        s, t = undefined_pairs[0]
        logger.warning(
            "1 distance was %s (taxa %d and %d); set to %g.",
            reason,
            s,
            t,
            fallback,
        )
    elif n_undefined <= 5:
        logger.warning(
            "%d distances were %s (taxon pairs: %s); set to %g.",
            n_undefined,
            reason,
            ", ".join(f"{s}-{t}" for s, t in undefined_pairs),
            fallback,
        )
    else:
        n_pairs = n_taxa * (n_taxa - 1) // 2
        logger.warning(
            "%d distances were %s (%.1f%% of all pairs); set to %g.",
            n_undefined,
            reason,
            100.0 * n_undefined / max(n_pairs, 1),
            fallback,
        )


def log_distance_statistics(method: str, n_taxa: int, n_sites: int, backend: str) -> None:
    """Log the size of a finished distance computation."""
    logger.info(
        "%s: %d taxa, %d active sites (backend=%r)", method, n_taxa, n_sites, backend
    )


# ============================================================================ #
# Optimiser Logging
# ============================================================================ #


def log_optimizer_exhausted(method: str, max_iter: int, x: float) -> None:
    """
    Warn that a 1-D minimiser hit its iteration limit.

    Parameters
    ----------
    method : str
        Name of the minimiser.
    max_iter : int
        Iteration limit that was reached.
    x : float
        Best abscissa found, which is returned to the caller.
    """
    logger.warning(
        "%s did not converge in %d iterations; using best point x=%.6g",
        method,
        max_iter,
        x,
    )


# ============================================================================ #
# Splits and Network Logging
# ============================================================================ #


def log_split_statistics(
    method: str,
    n_splits: int,
    n_sites_used: int,
    n_gap_sites: int,
    n_trivial_added: int,
) -> None:
    """
    Log the outcome of a majority-colour split scan.

    Parameters
    ----------
    method : str
        Name of the split constructor.
    n_splits : int
        Splits in the final system.
    n_sites_used : int
        Columns that produced or supported a split.
    n_gap_sites : int
        Columns skipped because of gaps or missing data.
    n_trivial_added : int
        Trivial splits added to complete the system.
    """
    logger.info(
        "%s: %d splits from %d sites (%d gap sites skipped)",
        method,
        n_splits,
        n_sites_used,
        n_gap_sites,
    )
    if n_trivial_added > 0:
        logger.info("  %d trivial splits added with weight 1", n_trivial_added)


def log_filtered_splits(n_removed: int, min_weight: float) -> None:
    if n_removed > 0:
        logger.info(
            "Removed %d splits with weight below %g", n_removed, min_weight
        )


def log_parsimony_summary(n_taxa: int, n_splits: int, n_sites: int) -> None:
    """Log the outcome of the parsimony splits."""
    logger.info(
        "Parsimony splits: %d splits on %d taxa from %d sites",
        n_splits,
        n_taxa,
        n_sites,
    )


def log_condensation_statistics(
    n_taxa: int, n_haplotypes: int, n_sites: int, n_condensed: int
) -> None:
    """
    Log how much quasi-median condensation reduced the alignment.

    Parameters
    ----------
    n_taxa, n_haplotypes : int
        Taxa before and distinct sequences after condensation.
    n_sites, n_condensed : int
        Active positions before and distinct columns after condensation.
    """
    logger.info(
        "Condensed %d taxa to %d haplotypes and %d sites to %d columns",
        n_taxa,
        n_haplotypes,
        n_sites,
        n_condensed,
    )
    if n_condensed == 0:
        logger.warning(
            "No variable sites remain after condensation; "
            "all sequences are identical up to gaps and missing data."
        )


def log_network_statistics(
    n_nodes: int, n_edges: int, n_tree_edges: int, threshold: float
) -> None:
    """Log the size of a minimum spanning network."""
    logger.info(
        "Minimum spanning network: %d nodes, %d edges (%d spanning), "
        "connected at distance %g",
        n_nodes,
        n_edges,
        n_tree_edges,
        threshold,
    )


def log_fallback_distances(n_undefined: int, fallback: float) -> None:
    """Warn once that undefined entries were set to twice the largest defined distance."""
    if n_undefined > 0:
        logger.warning(
            "Distance matrix contains %d undefined distances. These have been "
            "set to 2 times the maximum defined distance (= %g).",
            n_undefined,
            fallback,
        )
