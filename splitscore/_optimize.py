"""
_optimize.py
============
One-dimensional minimisers used for maximum-likelihood branch lengths.

Both functions minimise a unimodal function ``f`` over a closed interval and
never look at progress or cancellation: a single call is one unit of work of
the enclosing pairwise loop.

  golden_section(f, a, b, tol)   robust, linear convergence
  brent(f, a, b, tol, max_iter)  parabolic interpolation + golden steps
"""

import logging
import math
from typing import Callable

from splitscore._logging import log_optimizer_exhausted


logger = logging.getLogger(__name__)


GOLDEN_TAU = 2.0 / (1.0 + math.sqrt(5.0))  # 0.618...
CGOLD = 0.3819660  # 1 - GOLDEN_TAU
ZEPS = 1.0e-10


def golden_section(
    f: Callable[[float], float], a: float, b: float, tol: float = 1e-6
) -> float:
    """
    Golden-section search for the minimum of ``f`` on ``[a, b]``.

    Parameters
    ----------
    f : callable
        Function of one float to minimise.
    a, b : float
        Interval bounds, ``a < b``.
    tol : float, default 1e-6
        Stop once the bracket is narrower than this.

    Returns
    -------
    float
        Upper end of the final bracket.  If the minimum lies at the upper
        bound the returned value is exactly ``b``, which callers use to
        detect a boundary optimum.
    """
    aa = a + (1.0 - GOLDEN_TAU) * (b - a)
    bb = a + GOLDEN_TAU * (b - a)
    faa = f(aa)
    fbb = f(bb)

    while b - a > tol:
        if faa < fbb:
            b = bb
            bb = aa
            fbb = faa
            aa = a + (1.0 - GOLDEN_TAU) * (b - a)
            faa = f(aa)
        else:
            a = aa
            aa = bb
            faa = fbb
            bb = a + GOLDEN_TAU * (b - a)
            fbb = f(bb)
    return b


def brent(
    f: Callable[[float], float],
    a: float,
    b: float,
    tol: float = 1e-6,
    max_iter: int = 100,
) -> float:
    """
    Brent's method for the minimum of ``f`` on ``[a, b]``.

    Combines golden-section steps with parabolic interpolation through the
    three best points, giving superlinear convergence for smooth functions.

    Parameters
    ----------
    f : callable
        Function of one float to minimise.
    a, b : float
        Interval bounds, ``a < b``.
    tol : float, default 1e-6
        Fractional tolerance on the abscissa.
    max_iter : int, default 100
        Iteration limit.  When reached, a warning is logged and the best
        point found so far is returned.

    Returns
    -------
    float
        Abscissa of the minimum.
    """
    x = w = v = a + CGOLD * (b - a)
    fx = fw = fv = f(x)
    d = e = 0.0

    for _ in range(max_iter):
        xm = 0.5 * (a + b)
        tol1 = tol * abs(x) + ZEPS
        tol2 = 2.0 * tol1
        if abs(x - xm) <= tol2 - 0.5 * (b - a):
            return x

        if abs(e) > tol1:
            # Trial parabolic fit
            r = (x - w) * (fx - fv)
            q = (x - v) * (fx - fw)
            p = (x - v) * q - (x - w) * r
            q = 2.0 * (q - r)
            if q > 0.0:
                p = -p
            q = abs(q)
            etemp = e
            e = d
            if abs(p) >= abs(0.5 * q * etemp) or p <= q * (a - x) or p >= q * (b - x):
                e = (a - x) if x >= xm else (b - x)
                d = CGOLD * e
            else:
                d = p / q
                u = x + d
                if u - a < tol2 or b - u < tol2:
                    d = math.copysign(tol1, xm - x)
        else:
            e = (a - x) if x >= xm else (b - x)
            d = CGOLD * e

        u = x + d if abs(d) >= tol1 else x + math.copysign(tol1, d)
        fu = f(u)

        if fu <= fx:
            if u >= x:
                a = x
            else:
                b = x
            v, w, x = w, x, u
            fv, fw, fx = fw, fx, fu
        else:
            if u < x:
                a = u
            else:
                b = u
            if fu <= fw or w == x:
                v, w = w, u
                fv, fw = fw, fu
            elif fu <= fv or v == x or v == w:
                v = u
                fv = fu

    log_optimizer_exhausted("brent", max_iter, x)
    return x
