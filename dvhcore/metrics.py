#!/usr/bin/env python
# -*- coding: utf-8 -*-
# metrics.py
"""Dose and volume metrics (Dx, Vd, mean dose) of dose volume histograms."""
# Copyright (c) 2025 dvh-core contributors
# This file is part of dvh-core, released under a BSD license.
#    See the file license.txt included with this distribution.

import numpy as np
from dvhcore import config, convert
from dvhcore.exceptions import InsufficientDataError, InvalidConfigurationError
from dvhcore.quantity import VolumeValue, parse_volume_units, relative_units
from dvhcore.util import interpolate, quantile_type7
import logging
logger = logging.getLogger('dvhcore.metrics')


class QuantileInterpolator(object):
    """Exact metrics from the per-voxel dose samples of a structure."""

    def __init__(self, samples, total_volume=None):
        """Initialization for the exact quantile metrics.

        Parameters
        ----------
        samples : iterable or numpy array
            Per-voxel doses of the structure. They are sorted once here.
        total_volume : VolumeValue, optional
            Absolute structure volume, needed for absolute volume queries.
        """
        self.samples = np.sort(np.asarray(samples, dtype=float).ravel())
        if not self.samples.size:
            raise InsufficientDataError("Dose samples must not be empty.")
        self.total_volume = total_volume

    def _to_percent(self, volume):
        if volume.is_relative:
            return volume.value
        if self.total_volume is None or \
                volume.units != self.total_volume.units:
            raise InvalidConfigurationError(
                "Cannot compare a volume in '%s' with the structure volume." %
                volume.units)
        return 100.0 * volume.value / self.total_volume.value

    def _as_units(self, fraction, volume_units):
        units = parse_volume_units(volume_units)
        if units == relative_units:
            return VolumeValue(100.0 * fraction, relative_units)
        if self.total_volume is not None and \
                units == self.total_volume.units:
            return VolumeValue(fraction * self.total_volume.value, units)
        raise InvalidConfigurationError(
            "Unsupported volume units '%s' for raw sample metrics." %
            volume_units)

    def dose_at_volume(self, volume):
        """Return the minimum dose received by the hottest `volume`.

        Parameters
        ----------
        volume : VolumeValue
            Relative or absolute volume.

        Returns
        -------
        float
            The type 7 sample quantile at ``1 - volume / 100``, or NaN if
            the volume lies outside the structure.
        """
        p = 1.0 - self._to_percent(volume) / 100.0
        if not 0.0 <= p <= 1.0:
            return np.nan
        return quantile_type7(self.samples, p, presorted=True)

    def volume_at_dose(self, dose, volume_units=relative_units):
        """Return the volume of the samples receiving at least `dose`."""
        first = np.searchsorted(self.samples, dose, side='left')
        fraction = (self.samples.size - first) / float(self.samples.size)
        return self._as_units(fraction, volume_units)

    def dose_complement(self, volume):
        """Return the dose received by the structure minus `volume`."""
        return self.dose_at_volume(
            VolumeValue(100.0 - self._to_percent(volume), relative_units))

    def complement_volume_at_dose(self, dose, volume_units=relative_units):
        """Return the volume receiving less than `dose`."""
        return self._as_units(1.0, volume_units) - \
            self.volume_at_dose(dose, volume_units)

    def mean_dose(self):
        return float(self.samples.mean())

    def max_dose(self):
        return float(self.samples[-1])

    def min_dose(self):
        return float(self.samples[0])


class BinInterpolator(object):
    """Metrics interpolated from the cumulative curve of a DVH."""

    def __init__(self, dvh):
        """Initialization for the curve interpolation metrics.

        Parameters
        ----------
        dvh : dvh.DVH
            DVH of either type; differential DVHs are made cumulative.
        """
        self.dvh = convert.to_cumulative(dvh)

    def _curve_volume(self, volume):
        """Express a queried volume in the units of the curve."""
        dvh = self.dvh
        total = dvh.total_volume
        if volume.is_relative:
            if dvh.normalized:
                return volume.value
            return volume.value * total.value / 100.0
        if volume.units != total.units:
            raise InvalidConfigurationError(
                "Cannot compare a volume in '%s' with a DVH in '%s'." %
                (volume.units, total.units))
        if dvh.normalized:
            return 100.0 * volume.value / total.value
        return volume.value

    def _as_units(self, value, volume_units):
        """Express a curve volume in the requested units."""
        dvh = self.dvh
        units = parse_volume_units(volume_units)
        total = dvh.total_volume
        if units == dvh.volume_units:
            return VolumeValue(value, units)
        if units == relative_units:
            return VolumeValue(100.0 * value / total.value, units)
        if dvh.normalized and units == total.units:
            return VolumeValue(value * total.value / 100.0, units)
        raise InvalidConfigurationError(
            "Cannot express a DVH in '%s' as '%s'." %
            (dvh.volume_units, volume_units))

    def _dose_at(self, volume):
        doses, volumes = self.dvh.doses, self.dvh.volumes
        if not volumes.size or np.isnan(volume):
            return np.nan
        if volume <= volumes.min():
            return self.dvh.max_dose
        if volume == volumes.max():
            return self.dvh.min_dose
        if volume > volumes.max():
            return np.nan

        distance = np.abs(volumes - volume)
        i = int(np.argmin(distance))
        if distance[i] < config.volume_match_tolerance:
            return float(doses[i])
        if volumes[i] < volume:
            j = i - 1
        else:
            # Anchor on the high dose end of a plateau
            while i + 1 < volumes.size and volumes[i + 1] == volumes[i]:
                i += 1
            j = i + 1
        if j < 0 or j >= volumes.size:
            return np.nan
        return float(interpolate(
            volumes[i], volumes[j], doses[i], doses[j], volume))

    def dose_at_volume(self, volume):
        """Return the minimum dose received by the hottest `volume`.

        Parameters
        ----------
        volume : VolumeValue
            Relative or absolute volume.

        Returns
        -------
        float
            The maximum dose for volumes at or below the smallest curve
            volume, the minimum dose for the whole structure, NaN for
            volumes larger than the structure and otherwise the dose
            interpolated along the cumulative curve.
        """
        return self._dose_at(self._curve_volume(volume))

    def volume_at_dose(self, dose, volume_units=relative_units):
        """Return the volume receiving at least `dose`.

        Parameters
        ----------
        dose : float
            Dose in the units of the DVH.
        volume_units : str, optional
            Units of the returned volume.

        Returns
        -------
        VolumeValue
            Zero at or beyond the last curve dose, the whole structure below
            the first curve dose and otherwise the interpolated volume.
        """
        doses, volumes = self.dvh.doses, self.dvh.volumes
        if not volumes.size or np.isnan(dose):
            return VolumeValue(np.nan, volume_units)
        if dose >= doses.max():
            value = 0.0
        elif dose < doses.min():
            value = volumes.max()
        else:
            higher = int(np.searchsorted(doses, dose, side='right'))
            lower = higher - 1
            value = interpolate(doses[higher], doses[lower],
                                volumes[higher], volumes[lower], dose)
        return self._as_units(float(value), volume_units)

    def dose_complement(self, volume):
        """Return the dose received by the structure minus `volume`."""
        if not self.dvh.volumes.size:
            return np.nan
        return self._dose_at(
            self.dvh.volumes.max() - self._curve_volume(volume))

    def complement_volume_at_dose(self, dose, volume_units=relative_units):
        """Return the volume receiving less than `dose`."""
        if not self.dvh.volumes.size:
            return VolumeValue(np.nan, volume_units)
        total = self._as_units(float(self.dvh.volumes.max()), volume_units)
        return total - self.volume_at_dose(dose, volume_units)

    def mean_dose(self):
        """Return the volume weighted mean dose of the differential bins."""
        if self.dvh.doses.size < 2:
            return np.nan
        diff = convert.to_differential(self.dvh)
        volume = diff.volumes.sum()
        if volume == 0:
            return np.nan
        return float((diff.doses * diff.volumes).sum() / volume)

    def max_dose(self):
        if not self.dvh.doses.size:
            return np.nan
        return float(self.dvh.doses.max())

    def min_dose(self):
        if not self.dvh.doses.size:
            return np.nan
        return float(self.dvh.doses.min())


class MetricCalculator(object):
    """Dose and volume metrics of a DVH.

    The exact quantile metrics are used when the DVH carries its raw dose
    samples, otherwise the metrics are interpolated from the cumulative
    curve. The choice is made once, here.
    """

    def __init__(self, dvh):
        if dvh.has_raw_samples:
            self.strategy = 'quantile'
            self.interpolator = QuantileInterpolator(
                dvh.raw_samples, dvh.total_volume)
        else:
            self.strategy = 'interpolation'
            self.interpolator = BinInterpolator(dvh)
        logger.debug("Using %s metrics for DVH '%s'", self.strategy, dvh.name)

    def dose_at_volume(self, volume):
        return self.interpolator.dose_at_volume(volume)

    def volume_at_dose(self, dose, volume_units=relative_units):
        return self.interpolator.volume_at_dose(dose, volume_units)

    def dose_complement(self, volume):
        return self.interpolator.dose_complement(volume)

    def complement_volume_at_dose(self, dose, volume_units=relative_units):
        return self.interpolator.complement_volume_at_dose(dose, volume_units)

    def mean_dose(self):
        return self.interpolator.mean_dose()

    def max_dose(self):
        return self.interpolator.max_dose()

    def min_dose(self):
        return self.interpolator.min_dose()
