"""Low-level numerical kernels.

Numba compiled versions of the hot loops of the photometry builder.
"""
