#!/usr/bin/env python
# -*- coding: utf-8 -*-
# dvhcalc.py
"""Calculate dose volume histograms (DVH) from dose samples or DVH tables."""
# Copyright (c) 2025 dvh-core contributors
# This file is part of dvh-core, released under a BSD license.
#    See the file license.txt included with this distribution.

import numpy as np
from dvhcore import config
from dvhcore.dvh import DVH, DVHPoint
from dvhcore.exceptions import InsufficientDataError, InvalidConfigurationError
from dvhcore.quantity import (
    VolumeValue, abs_dose_units, abs_volume_units, relative_units,
    is_absolute_volume_units)
import logging
logger = logging.getLogger('dvhcore.dvhcalc')


def from_dose_matrix(samples,
                     voxel_volume,
                     dose_units=abs_dose_units,
                     bin_width=config.default_bin_width,
                     dvh_type='cumulative',
                     name='',
                     enforce_positive=config.default_enforce_positive):
    """Calculate a DVH from the per-voxel doses of a structure.

    Parameters
    ----------
    samples : iterable or numpy array
        Dose of every voxel inside the structure.
    voxel_volume : VolumeValue or number
        Volume of a single voxel in cm3 or mm3. Numbers are taken as cm3.
    dose_units : str, optional
        Units of the dose samples.
    bin_width : float, optional
        Width of the dose bins in `dose_units`.
    dvh_type : str, optional
        Choice of 'cumulative' (bin edge doses) or 'differential' (bin
        center doses) type of DVH.
    name : str, optional
        Name of the structure of the DVH.
    enforce_positive : bool, optional
        Reject negative doses and a negative voxel volume.

    Returns
    -------
    dvh.DVH
        A DVH that keeps the dose samples for exact metrics.

    Raises
    ------
    InvalidConfigurationError
        If the voxel volume is relative or of unknown units, the bin width
        is not positive, or negative values are rejected.
    InsufficientDataError
        If there are no dose samples.
    """
    if not isinstance(voxel_volume, VolumeValue):
        voxel_volume = VolumeValue(voxel_volume, abs_volume_units)
    if not is_absolute_volume_units(voxel_volume.units):
        raise InvalidConfigurationError(
            "Voxel volume must be either in cm3 or mm3, not '%s'." %
            voxel_volume.units)
    if not bin_width > 0:
        raise InvalidConfigurationError(
            "Bin width must be positive, not %r." % bin_width)
    dvh_type = dvh_type.lower()

    samples = np.asarray(samples, dtype=float).ravel()
    if not samples.size:
        raise InsufficientDataError(
            "Cannot calculate a DVH of '%s' without dose samples." % name)
    if np.isnan(samples).any():
        raise InvalidConfigurationError("Dose samples must not be NaN.")
    if enforce_positive and \
            (samples.min() < 0 or voxel_volume.value < 0):
        raise InvalidConfigurationError("Negative doses are not supported.")

    max_dose = float(samples.max())
    min_dose = float(samples.min())
    if dvh_type == 'cumulative':
        doses, counts = cumulative_histogram(samples, bin_width, max_dose)
    elif dvh_type == 'differential':
        doses, counts = differential_histogram(samples, bin_width, max_dose)
    else:
        raise InvalidConfigurationError("Unknown DVH type '%s'." % dvh_type)
    logger.debug("Calculating %s DVH of %s from %d dose samples, "
                 "%d bins of %r %s", dvh_type, name, samples.size,
                 doses.size, bin_width, dose_units)

    return DVH(doses=doses,
               volumes=counts * voxel_volume.value,
               dvh_type=dvh_type,
               dose_units=dose_units,
               volume_units=voxel_volume.units,
               bin_width=bin_width,
               num_bins=doses.size,
               max_dose=max_dose,
               min_dose=min_dose,
               total_volume=voxel_volume * samples.size,
               source='dose_matrix',
               raw_samples=samples,
               name=name)


def _bin_indices(samples, bin_width, last_bin):
    """Return the edge aligned bin of each sample, clamped to last_bin."""
    index = np.floor(samples / bin_width).astype(np.int64)
    return np.clip(index, 0, last_bin)


def cumulative_histogram(samples, bin_width, max_dose=None):
    """Return bin edge doses and cumulative voxel counts of the samples.

    There are ``ceil(max_dose / bin_width)`` bins plus a final edge; a
    sample beyond the last edge is counted in the final one. Counts are
    accumulated from the highest edge down, so they never increase with
    dose.
    """
    if max_dose is None:
        max_dose = samples.max()
    num_bins = max(int(np.ceil(max_dose / bin_width)), 0)
    counts = np.bincount(_bin_indices(samples, bin_width, num_bins),
                         minlength=num_bins + 1)
    counts = counts[::-1].cumsum()[::-1]
    doses = np.arange(num_bins + 1) * bin_width
    return doses, counts


def differential_histogram(samples, bin_width, max_dose=None):
    """Return bin center doses and voxel counts per bin of the samples.

    There are ``ceil(max_dose / bin_width) + 1`` bins; samples past the last
    bin are counted in it.
    """
    if max_dose is None:
        max_dose = samples.max()
    num_bins = max(int(np.ceil(max_dose / bin_width)), 0) + 1
    counts = np.bincount(_bin_indices(samples, bin_width, num_bins - 1),
                         minlength=num_bins)
    doses = (np.arange(num_bins) + 0.5) * bin_width
    return doses, counts


def from_dvh_points(points,
                    max_dose,
                    min_dose,
                    total_volume,
                    dose_units=abs_dose_units,
                    dvh_type='cumulative',
                    name='',
                    enforce_positive=config.default_enforce_positive):
    """Calculate a DVH from an exported table of (dose, volume) points.

    Parameters
    ----------
    points : iterable of DVHPoint or (dose, VolumeValue) tuples
        Curve points in ascending dose order. Relative ('%') volumes are
        rescaled to absolute volumes with `total_volume`.
    max_dose : float
        Maximum dose of the structure.
    min_dose : float
        Minimum dose of the structure.
    total_volume : VolumeValue or number
        Absolute volume of the structure. Numbers are taken as cm3.
    dose_units : str, optional
        Units of the point doses.
    dvh_type : str, optional
        Choice of 'cumulative' or 'differential' type of DVH.
    name : str, optional
        Name of the structure of the DVH.
    enforce_positive : bool, optional
        Reject negative volumes.

    Returns
    -------
    dvh.DVH
        A DVH without dose samples; metrics are interpolated on its curve.

    Raises
    ------
    InsufficientDataError
        If fewer than two points are given, as the bin width is inferred
        from the first two.
    InvalidConfigurationError
        If the units of the points or the total volume are inconsistent.
    """
    points = [DVHPoint(float(d), v) for d, v in points]
    if len(points) < 2:
        raise InsufficientDataError(
            "At least two DVH points are needed, got %d." % len(points))
    if not isinstance(total_volume, VolumeValue):
        total_volume = VolumeValue(total_volume, abs_volume_units)
    if not is_absolute_volume_units(total_volume.units):
        raise InvalidConfigurationError(
            "Total volume must be either in cm3 or mm3, not '%s'." %
            total_volume.units)

    units = points[0].volume.units
    if any(p.volume.units != units for p in points):
        raise InvalidConfigurationError(
            "DVH points of '%s' mix volume units." % name)
    doses = np.array([p.dose for p in points])
    volumes = np.array([p.volume.value for p in points])
    # Rescale before anything is derived from the volumes
    if units == relative_units:
        volumes = volumes * total_volume.value / 100.0
    elif units != total_volume.units:
        raise InvalidConfigurationError(
            "DVH points in '%s' do not match the total volume in '%s'." %
            (units, total_volume.units))
    if enforce_positive and (volumes < 0).any():
        raise InvalidConfigurationError("Negative volumes are not supported.")

    bin_width = abs(doses[0] - doses[1])
    order = np.argsort(doses, kind='stable')
    logger.debug("Loading %s DVH of %s from %d points, bin width %r %s",
                 dvh_type, name, len(points), bin_width, dose_units)

    return DVH(doses=doses[order],
               volumes=volumes[order],
               dvh_type=dvh_type,
               dose_units=dose_units,
               volume_units=total_volume.units,
               bin_width=bin_width,
               num_bins=len(points),
               max_dose=max_dose,
               min_dose=min_dose,
               total_volume=total_volume,
               source='exported_dvh',
               name=name)
