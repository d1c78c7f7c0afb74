#!/usr/bin/env python
# -*- coding: utf-8 -*-
# dvh.py
"""Class that stores dose volume histogram (DVH) data."""
# Copyright (c) 2025 dvh-core contributors
# This file is part of dvh-core, released under a BSD license.
#    See the file license.txt included with this distribution.

import collections
import re
import numpy as np
from dvhcore import config, convert
from dvhcore.exceptions import InvalidConfigurationError
from dvhcore.metrics import MetricCalculator
from dvhcore.quantity import (
    VolumeValue, abs_dose_units, abs_volume_units, relative_units,
    parse_dose_units, parse_volume_units, cm3, percent)
import logging
logger = logging.getLogger('dvhcore.dvh')

dvh_types = ('cumulative', 'differential')

# Where the histogram data originated from
dvh_sources = ('dose_matrix', 'exported_dvh', 'monte_carlo')


class DVHPoint(collections.namedtuple('DVHPoint', ['dose', 'volume'])):
    """A single (dose, volume) point on a DVH curve.

    Equality is component-wise; the volume comparison uses the tolerance
    of the volume quantity.
    """

    __slots__ = ()

    def __repr__(self):
        return 'DVHPoint(dose=%r, volume=%r)' % (self.dose, self.volume)


def _readonly(values):
    """Return a read-only float copy of the given values."""
    if isinstance(values, np.ndarray) and values.dtype == float and \
            values.ndim == 1 and values.flags.owndata and \
            not values.flags.writeable:
        # Already frozen, share it between derived histograms
        return values
    arr = np.array([] if values is None else values, dtype=float)
    if arr.ndim != 1:
        arr = arr.flatten()
    arr.setflags(write=False)
    return arr


class DVH(object):
    """Class that stores dose volume histogram (DVH) data.

    A DVH is an immutable value. Conversions between cumulative and
    differential curves or to a relative volume return new instances.
    """

    def __init__(self, doses, volumes,
                 dvh_type='cumulative',
                 dose_units=abs_dose_units,
                 volume_units=abs_volume_units,
                 bin_width=None,
                 num_bins=None,
                 max_dose=None,
                 min_dose=None,
                 total_volume=None,
                 source='exported_dvh',
                 raw_samples=None,
                 normalized=False,
                 name=''):
        """Initialization for a DVH from an existing curve.

        Parameters
        ----------
        doses : iterable or numpy array
            Dose of each curve point in ascending order. Bin edges for a
            cumulative DVH, bin centers for a differential DVH.
        volumes : iterable or numpy array
            Volume of each curve point in `volume_units`
        dvh_type : str, optional
            Choice of 'cumulative' or 'differential' type of DVH
        dose_units : str, optional
            Absolute dose units, i.e. 'Gy' or relative units '%'
        volume_units : str, optional
            Absolute volume units, i.e. 'cm3' or relative units '%'
        bin_width : float, optional
            Dose bin width, inferred from the first two points if omitted
        num_bins : int, optional
            Number of bins, the number of curve points if omitted
        max_dose : float, optional
            Maximum dose of the structure
        min_dose : float, optional
            Minimum dose of the structure
        total_volume : VolumeValue or number, optional
            Absolute volume of the structure
        source : str, optional
            One of 'dose_matrix', 'exported_dvh' or 'monte_carlo'
        raw_samples : iterable or numpy array, optional
            Per-voxel doses, required for (and only for) 'dose_matrix' DVHs
        normalized : bool, optional
            Whether the volumes are expressed relative to the total volume
        name : str, optional
            Name of the structure of the DVH
        """
        doses = _readonly(doses)
        volumes = _readonly(volumes)
        raw_samples = _readonly(raw_samples)
        dvh_type = dvh_type.lower()
        volume_units = parse_volume_units(volume_units)

        if dvh_type not in dvh_types:
            raise InvalidConfigurationError(
                "Unknown DVH type '%s'." % dvh_type)
        if source not in dvh_sources:
            raise InvalidConfigurationError(
                "Unknown DVH source '%s'." % source)
        if doses.size != volumes.size:
            raise InvalidConfigurationError(
                "DVH has %d doses but %d volumes." %
                (doses.size, volumes.size))
        if (source == 'dose_matrix') != bool(raw_samples.size):
            raise InvalidConfigurationError(
                "Raw dose samples must be present exactly when the DVH "
                "source is a dose matrix.")
        # Bin width inference relies on the ascending dose order
        if np.any(np.diff(doses) < 0):
            raise InvalidConfigurationError(
                "DVH doses must be sorted in ascending order.")

        if bin_width is None:
            bin_width = abs(doses[1] - doses[0]) if doses.size > 1 else 0.0
        if num_bins is None:
            num_bins = doses.size
        extents = raw_samples if raw_samples.size else doses
        if max_dose is None:
            max_dose = extents.max() if extents.size else np.nan
        if min_dose is None:
            min_dose = extents.min() if extents.size else np.nan
        if total_volume is None:
            if not volumes.size:
                total_volume = 0.0
            elif dvh_type == 'cumulative':
                total_volume = volumes.max()
            else:
                total_volume = volumes.sum()
        if not isinstance(total_volume, VolumeValue):
            total_volume = VolumeValue(total_volume, volume_units)

        self._set(doses=doses,
                  volumes=volumes,
                  dvh_type=dvh_type,
                  dose_units=parse_dose_units(dose_units),
                  volume_units=volume_units,
                  bin_width=float(bin_width),
                  num_bins=int(num_bins),
                  max_dose=float(max_dose),
                  min_dose=float(min_dose),
                  total_volume=total_volume,
                  source=source,
                  raw_samples=raw_samples,
                  normalized=bool(normalized),
                  name=name)

    _fields = ('doses', 'volumes', 'dvh_type', 'dose_units', 'volume_units',
               'bin_width', 'num_bins', 'max_dose', 'min_dose',
               'total_volume', 'source', 'raw_samples', 'normalized', 'name')

    def _set(self, **fields):
        self.__dict__.update(fields)

    def __setattr__(self, name, value):
        raise AttributeError("'DVH' object is immutable")

    def __delattr__(self, name):
        raise AttributeError("'DVH' object is immutable")

    def replace(self, **changes):
        """Return a new DVH with the given fields replaced."""
        fields = {k: self.__dict__[k] for k in self._fields}
        return DVH(**dict(fields, **changes))

    @classmethod
    def from_dose_matrix(cls, samples, voxel_volume, **kwargs):
        """Initialization for a DVH from per-voxel dose samples.

        See `dvhcore.dvhcalc.from_dose_matrix` for the parameters.
        """
        from dvhcore import dvhcalc

        return dvhcalc.from_dose_matrix(samples, voxel_volume, **kwargs)

    @classmethod
    def from_dvh_points(cls, points, max_dose, min_dose, total_volume,
                        **kwargs):
        """Initialization for a DVH from an exported (dose, volume) table.

        See `dvhcore.dvhcalc.from_dvh_points` for the parameters.
        """
        from dvhcore import dvhcalc

        return dvhcalc.from_dvh_points(
            points, max_dose, min_dose, total_volume, **kwargs)

    def __repr__(self):
        """String representation of the class."""
        return 'DVH(%s, %r bins: [%r:%r] %s, volume: %r %s, name: %r, ' \
            'source: %s)' % \
            (self.dvh_type, self.num_bins,
                float(self.doses.min()) if self.doses.size else None,
                float(self.doses.max()) if self.doses.size else None,
                self.dose_units,
                self.total_volume.value, self.total_volume.units,
                self.name, self.source)

    def __eq__(self, other):
        """Comparison method between two DVH objects.

        Parameters
        ----------
        other : DVH
            Other DVH object to compare with

        Returns
        -------
        Bool
            True or False if the DVHs have equal attribs and curves that
            agree within the volume tolerance
        """
        if not isinstance(other, DVH):
            return NotImplemented
        attribs = ('dvh_type', 'dose_units', 'volume_units', 'num_bins')
        attribs_eq = {k: self.__dict__[k] for k in attribs} == \
            {k: other.__dict__[k] for k in attribs}
        scalars = np.array([self.bin_width, self.max_dose, self.min_dose])
        other_scalars = np.array(
            [other.bin_width, other.max_dose, other.min_dose])
        return attribs_eq and \
            self.total_volume == other.total_volume and \
            np.allclose(scalars, other_scalars, equal_nan=True) and \
            self.doses.shape == other.doses.shape and \
            np.allclose(self.doses, other.doses,
                        rtol=0, atol=config.bin_width_tolerance) and \
            np.allclose(self.volumes, other.volumes,
                        rtol=0, atol=config.volume_error)

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    __hash__ = None

# ============================= DVH properties ============================= #

    @property
    def curve(self):
        """Return the curve as a tuple of DVHPoint in ascending dose."""
        return tuple(DVHPoint(d, VolumeValue(v, self.volume_units))
                     for d, v in zip(self.doses.tolist(),
                                     self.volumes.tolist()))

    @property
    def bincenters(self):
        """Return a numpy array containing the bin centers."""
        if self.dvh_type == 'differential':
            return self.doses
        return self.doses + 0.5 * self.bin_width

    @property
    def has_raw_samples(self):
        """Return True if per-voxel dose samples are available."""
        return self.raw_samples.size > 0

    @property
    def volume(self):
        """Return the absolute volume of the structure."""
        return self.total_volume.value

    @property
    def differential(self):
        """Return a differential DVH from a cumulative DVH."""
        return convert.to_differential(self)

    @property
    def cumulative(self):
        """Return a cumulative DVH from a differential DVH."""
        return convert.to_cumulative(self)

    @property
    def relative_volume(self):
        """Return a DVH with volumes relative to the total volume."""
        if self.normalized:
            return self
        return convert.normalize_volume(self)

    @property
    def mean(self):
        """Return the mean dose."""
        return self.metrics().mean_dose()

# ============================== DVH metrics =============================== #

    def metrics(self):
        """Return the metric calculator for this DVH.

        The calculator is created on first use and reused afterwards, so the
        raw dose samples are only sorted once.
        """
        calculator = self.__dict__.get('_calculator')
        if calculator is None:
            calculator = MetricCalculator(self)
            self._set(_calculator=calculator)
        return calculator

    def dose_at_volume(self, volume):
        """Calculate the minimum dose received by a specific volume.

        i.e. D90, D100 or D2cc

        Parameters
        ----------
        volume : VolumeValue or number
            Volume in relative or absolute units. Plain numbers are
            treated as a percentage of the structure volume.

        Returns
        -------
        float
            Dose in self.dose_units units, NaN if the volume exceeds the
            structure.
        """
        if not isinstance(volume, VolumeValue):
            volume = percent(volume)
        return self.metrics().dose_at_volume(volume)

    def volume_at_dose(self, dose, volume_units=None):
        """Calculate the volume that receives at least a specific dose.

        i.e. V20Gy

        Parameters
        ----------
        dose : number
            Dose value in self.dose_units units.
        volume_units : str, optional
            Units of the returned volume, self.volume_units if omitted.

        Returns
        -------
        VolumeValue
            Volume receiving at least `dose`.
        """
        return self.metrics().volume_at_dose(
            dose, volume_units or self.volume_units)

    def statistic(self, name):
        """Return a DVH dose or volume statistic.

        Parameters
        ----------
        name : str
            DVH statistic in the form of D90, D100, D2cc, V20 or V20Gy, etc.

        Returns
        -------
        float or VolumeValue
            Dose for a dose statistic, volume for a volume statistic.
        """
        # Compile a regex to determine dose & volume statistics
        p = re.compile(r'(\S+)?(D|V){1}(\d+[.]?\d*)(gy|cgy|cc|%)?(?!\S+)',
                       re.IGNORECASE)
        match = re.match(p, name)
        # Return the default attribute if not a dose or volume statistic
        if not match or match.groups()[0] is not None:
            raise AttributeError("'DVH' has no attribute '%s'" % name)

        # Process the regex match
        c = [x.lower() for x in match.groups() if x]
        value = float(c[1])
        units = c[2] if len(c) == 3 else None
        if c[0] == 'd':
            # Dose Constraints (i.e. D90) & return a dose
            if units in (None, relative_units):
                return self.dose_at_volume(percent(value))
            # Dose Constraints in abs volume (i.e. D2cc) & return a dose
            if units == 'cc':
                return self.dose_at_volume(cm3(value))
        elif c[0] == 'v':
            # Volume Constraints (i.e. V20 or V20Gy) & return a volume
            if units is None or units == self.dose_units.lower():
                return self.volume_at_dose(value)
        raise AttributeError("'DVH' has no attribute '%s'" % name)

    def __getattr__(self, name):
        """Method used to dynamically determine dose or volume stats.

        Parameters
        ----------
        name : string
            Property name called to determine dose & volume statistics

        Returns
        -------
        float or VolumeValue
            Value from the dose or volume statistic calculation.
        """
        if name.startswith('_'):
            raise AttributeError("'DVH' has no attribute '%s'" % name)
        return self.statistic(name)

    def describe(self):
        """Describe a summary of DVH statistics in a text based format."""
        print("Structure: {}".format(self.name))
        print("-----")
        dose = "rel dose" if self.dose_units == relative_units else \
            "abs dose: {}".format(self.dose_units)
        vol = "rel volume" if self.volume_units == relative_units else \
            "abs volume: {}".format(self.volume_units)
        print("DVH Type:  {}, {}, {}".format(
            self.dvh_type, dose, vol))
        print("Source:    {}".format(self.source.replace('_', ' ')))
        print("Volume:    {:0.2f} {}".format(
            self.total_volume.value, self.total_volume.units))
        print("Max Dose:  {:0.2f} {}".format(
            self.max_dose, self.dose_units))
        print("Min Dose:  {:0.2f} {}".format(
            self.min_dose, self.dose_units))
        print("Mean Dose: {:0.2f} {}".format(
            self.mean, self.dose_units))
        print("D98:       {:0.2f} {}".format(self.D98, self.dose_units))
        print("D95:       {:0.2f} {}".format(self.D95, self.dose_units))
        print("D50:       {:0.2f} {}".format(self.D50, self.dose_units))
        print("D2:        {:0.2f} {}".format(self.D2, self.dose_units))
        # Absolute volume statistics need an absolute total volume
        if self.total_volume.units == 'cm3':
            print("D2cc:      {:0.2f} {}".format(
                self.D2cc, self.dose_units))
