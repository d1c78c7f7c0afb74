#!/usr/bin/env python
# -*- coding: utf-8 -*-
# convert.py
"""Convert DVHs between cumulative, differential and relative volume form."""
# Copyright (c) 2025 dvh-core contributors
# This file is part of dvh-core, released under a BSD license.
#    See the file license.txt included with this distribution.

import numpy as np
from dvhcore import config
from dvhcore.exceptions import NonUniformBinningError, UndefinedBinWidthError
from dvhcore.quantity import VolumeValue, relative_units
import logging
logger = logging.getLogger('dvhcore.convert')


def get_bin_width(dvh):
    """Return the dose spacing between the first two points of the curve.

    Parameters
    ----------
    dvh : dvh.DVH
        DVH with at least two curve points.

    Raises
    ------
    UndefinedBinWidthError
        If the curve has fewer than two points.
    """
    if dvh.doses.size < 2:
        raise UndefinedBinWidthError(
            "Bin width of DVH '%s' is undefined for %d curve point(s)." %
            (dvh.name, dvh.doses.size))
    return float(dvh.doses[1] - dvh.doses[0])


def check_uniform_bins(doses, bin_width,
                       tolerance=config.bin_width_tolerance):
    """Raise NonUniformBinningError if any dose spacing differs from bin_width.
    """
    deviation = np.abs(np.diff(doses) - bin_width)
    bad = np.flatnonzero(deviation > tolerance)
    if bad.size:
        i = int(bad[0])
        raise NonUniformBinningError(i, doses[i + 1] - doses[i], bin_width)


def to_differential(dvh):
    """Return a differential DVH from a cumulative DVH.

    Each bin spans two neighbouring cumulative edges and holds the volume
    lost between them. The last edge has no successor; its bin keeps the
    whole remaining cumulative volume (zero volume beyond the curve).

    Parameters
    ----------
    dvh : dvh.DVH
        Cumulative DVH with uniformly spaced bin edges. A differential DVH
        is returned unchanged.

    Returns
    -------
    dvh.DVH
        A new differential DVH with bin center doses.

    Raises
    ------
    UndefinedBinWidthError
        If the curve has fewer than two points.
    NonUniformBinningError
        If the edges are not spaced by a constant bin width.
    """
    if dvh.dvh_type == 'differential':
        return dvh
    bin_width = get_bin_width(dvh)
    check_uniform_bins(dvh.doses, bin_width)

    counts = np.append(dvh.volumes[:-1] - dvh.volumes[1:], dvh.volumes[-1:])
    logger.debug("Converting DVH '%s' to differential, %d bins of %r %s",
                 dvh.name, counts.size, bin_width, dvh.dose_units)
    return dvh.replace(doses=dvh.doses + 0.5 * bin_width,
                       volumes=counts,
                       dvh_type='differential',
                       bin_width=bin_width,
                       num_bins=counts.size)


def to_cumulative(dvh):
    """Return a cumulative DVH from a differential DVH.

    The bins are accumulated from the highest dose down and each bin center
    is moved back to its lower edge. The total volume is taken from the
    accumulated sum rather than copied from the differential DVH.

    Parameters
    ----------
    dvh : dvh.DVH
        Differential DVH with uniformly spaced bin centers. A cumulative DVH
        is returned unchanged.

    Returns
    -------
    dvh.DVH
        A new cumulative DVH with bin edge doses.

    Raises
    ------
    UndefinedBinWidthError
        If the curve has fewer than two points.
    """
    if dvh.dvh_type == 'cumulative':
        return dvh
    bin_width = get_bin_width(dvh)

    counts = dvh.volumes[::-1].cumsum()[::-1]
    total_volume = dvh.total_volume
    if not dvh.normalized:
        total_volume = VolumeValue(
            counts[0] if counts.size else 0.0,
            dvh.volume_units, dvh.total_volume.error)
    logger.debug("Converting DVH '%s' to cumulative, %d bins of %r %s",
                 dvh.name, counts.size, bin_width, dvh.dose_units)
    return dvh.replace(doses=dvh.doses - 0.5 * bin_width,
                       volumes=counts,
                       dvh_type='cumulative',
                       bin_width=bin_width,
                       num_bins=counts.size,
                       total_volume=total_volume)


def normalize_volume(dvh):
    """Return a DVH with every volume expressed in percent of the total.

    The total volume and the dose extents still describe the absolute
    structure. The DVH must not be normalized already.

    Parameters
    ----------
    dvh : dvh.DVH
        DVH with absolute volumes.

    Returns
    -------
    dvh.DVH
        A new DVH in relative ('%') volume units.
    """
    if dvh.normalized:
        logger.warning("DVH '%s' is already normalized; volumes will be "
                       "rescaled a second time.", dvh.name)
    total = dvh.total_volume.value
    return dvh.replace(volumes=100 * dvh.volumes / total,
                       volume_units=relative_units,
                       normalized=True)
