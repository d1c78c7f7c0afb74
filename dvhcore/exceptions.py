#!/usr/bin/env python
# -*- coding: utf-8 -*-
# exceptions.py
"""Exceptions raised on structurally invalid dose volume histograms."""
# Copyright (c) 2025 dvh-core contributors
# This file is part of dvh-core, released under a BSD license.
#    See the file license.txt included with this distribution.


class DVHError(Exception):
    """Base class for dvh-core errors."""
    pass


class InvalidConfigurationError(DVHError, ValueError):
    """Raised when a histogram is requested with unusable units or inputs."""
    pass


class InsufficientDataError(DVHError, ValueError):
    """Raised when there are too few samples or points to build a curve."""
    pass


class UndefinedBinWidthError(InsufficientDataError):
    """Raised when a bin width cannot be inferred from a curve."""
    pass


class NonUniformBinningError(DVHError, ValueError):
    """Raised when the dose spacing of a curve is not constant."""

    def __init__(self, index, delta, bin_width):
        self.index = index
        self.delta = delta
        self.bin_width = bin_width
        super(NonUniformBinningError, self).__init__(
            "Non-uniform bin width detected at bin %d: delta=%r, "
            "expected=%r" % (index, delta, bin_width))
