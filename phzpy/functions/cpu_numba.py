from numba import jit

import numpy as np


@jit(nopython=True, nogil=True, cache=True)
def linear_value(x: float, xp: np.ndarray, fp: np.ndarray) -> float:
    """Linear interpolation of ``(xp, fp)`` at ``x``, zero outside the samples."""
    if x < xp[0] or x > xp[-1]:
        return 0.0
    low = 0
    high = xp.size - 1
    while high - low > 1:
        mid = (low + high) // 2
        if xp[mid] <= x:
            low = mid
        else:
            high = mid
    slope = (fp[high] - fp[low]) / (xp[high] - xp[low])
    return fp[low] + slope * (x - xp[low])


@jit(nopython=True, nogil=True, cache=True)
def filtered_integral(
    x: np.ndarray,
    y: np.ndarray,
    filter_x: np.ndarray,
    filter_y: np.ndarray,
    low: float,
    high: float,
) -> float:
    """The function `filtered_integral` integrates a sampled spectrum through a filter.

    Parameters
    ----------
    x, y : np.ndarray
        Spectrum samples, ``x`` strictly increasing.
    filter_x, filter_y : np.ndarray
        Filter response samples.
    low, high : float
        Filter support. Spectrum samples outside of it are dropped.

    Returns
    -------
        The exact integral of the linear interpolant through the samples
        ``(x, y * filter(x))`` kept inside ``[low, high]``. Zero when fewer
        than two samples are kept.

    """
    total = 0.0
    count = 0
    previous_x = 0.0
    previous_value = 0.0
    for i in range(x.size):
        xi = x[i]
        if xi < low:
            continue
        if xi > high:
            break
        value = y[i] * linear_value(xi, filter_x, filter_y)
        if count > 0:
            total += 0.5 * (xi - previous_x) * (value + previous_value)
        previous_x = xi
        previous_value = value
        count += 1
    if count < 2:
        return 0.0
    return total
