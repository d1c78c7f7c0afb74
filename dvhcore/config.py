#!/usr/bin/env python
# -*- coding: utf-8 -*-
# config.py
"""Configuration for dvh-core."""
# Copyright (c) 2025 dvh-core contributors
# This file is part of dvh-core, released under a BSD license.
#    See the file license.txt included with this distribution.

# Maximum deviation between adjacent bin spacings and the inferred bin width
bin_width_tolerance = 1e-6

# Absolute tolerance used when comparing volume quantities
volume_error = 1e-6

# A curve point closer than this (in volume units) to a queried volume
# is returned as is, without interpolation
volume_match_tolerance = 0.001

# Bin width (in dose units) used when building from a dose matrix
default_bin_width = 0.01

# Reject negative doses and volumes when building a histogram
default_enforce_positive = True
