#!/usr/bin/env python
# -*- coding: utf-8 -*-
# util.py
"""Numerical helper functions shared by the histogram modules."""
# Copyright (c) 2025 dvh-core contributors
# This file is part of dvh-core, released under a BSD license.
#    See the file license.txt included with this distribution.

import numpy as np
from dvhcore.exceptions import InsufficientDataError


def interpolate(x1, x3, y1, y3, x2):
    """Linearly interpolate y2 at x2 on the line through (x1, y1), (x3, y3).

    The two anchor points may be given in either order.
    """
    return (x2 - x1) * (y3 - y1) / (x3 - x1) + y1


def quantile_type7(data, p, presorted=False):
    """
    Compute sample quantiles with R's default (type 7) definition.

    For ``n`` sorted samples ``x`` and a probability ``p`` the quantile is
    found at the 1-based position ``h = 1 + (n - 1) * p``. With
    ``j = floor(h) - 1`` (0-based) and ``gamma = h - floor(h)``::

            |--
            |x[0]                                  if j < 0
      Q(p) =|x[n-1]                                if j >= n - 1
            |(1 - gamma) * x[j] + gamma * x[j+1]   otherwise
            |--

    This is also the 'linear' method of `numpy.quantile`.

    Parameters
    ----------
    data : iterable or numpy array
        Sample values.
    p : float or iterable of float
        Probabilities in the closed interval [0, 1].
    presorted : bool, optional
        Skip sorting when `data` is already in ascending order. Sorting
        dominates the cost for large sample sets, so callers evaluating
        many quantiles should sort once and pass ``presorted=True``.

    Returns
    -------
    float or ndarray
        A float for a scalar `p`, otherwise an array shaped like `p`.

    Raises
    ------
    InsufficientDataError
        If `data` is empty.
    ValueError
        If any probability lies outside [0, 1].

    Examples
    --------
    >>> quantile_type7([1, 2, 3, 4], 0.5)
    2.5
    >>> quantile_type7([3, 1, 2], [0, 1])
    array([1., 3.])

    """
    x = np.asarray(data, dtype=float).ravel()
    if x.size == 0:
        raise InsufficientDataError("Data must not be empty.")
    prob = np.asarray(p, dtype=float)
    if prob.size == 0:
        raise ValueError("Quantile probabilities must not be empty.")
    if np.any((prob < 0) | (prob > 1)) or np.any(np.isnan(prob)):
        raise ValueError(
            "Each quantile probability must be between 0 and 1.")
    if not presorted:
        x = np.sort(x)
    n = x.size

    if n == 1:
        result = np.full(prob.shape, x[0])
    else:
        h = 1 + (n - 1) * prob
        j = np.floor(h).astype(int) - 1
        gamma = h - np.floor(h)
        lower = x[np.clip(j, 0, n - 1)]
        upper = x[np.clip(j + 1, 0, n - 1)]
        result = np.where(
            j < 0, x[0],
            np.where(j >= n - 1, x[n - 1],
                     (1 - gamma) * lower + gamma * upper))

    if prob.ndim == 0:
        return float(result)
    return result
