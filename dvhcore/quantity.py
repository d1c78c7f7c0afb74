#!/usr/bin/env python
# -*- coding: utf-8 -*-
# quantity.py
"""Volume quantities that carry their units and an equality tolerance."""
# Copyright (c) 2025 dvh-core contributors
# This file is part of dvh-core, released under a BSD license.
#    See the file license.txt included with this distribution.

import math
import numbers
from dvhcore import config

# Set default absolute dose and volume units
abs_dose_units = 'Gy'
abs_volume_units = 'cm3'
relative_units = '%'
unknown_units = 'unknown'

_volume_aliases = {
    'cm3': 'cm3', 'cm³': 'cm3', 'cc': 'cm3',
    'mm3': 'mm3', 'mm³': 'mm3',
    '%': '%', 'percent': '%'}

_dose_aliases = {
    'gy': 'Gy', 'cgy': 'cGy', '%': '%', 'percent': '%'}


def parse_volume_units(units):
    """Return the canonical name of a volume unit.

    Parameters
    ----------
    units : str
        Volume units such as 'cc', 'CM3', 'mm³' or '%'

    Returns
    -------
    str
        One of 'cm3', 'mm3', '%' or 'unknown'.
    """
    if not units:
        return unknown_units
    return _volume_aliases.get(units.strip().lower(), unknown_units)


def parse_dose_units(units):
    """Return the canonical name of a dose unit ('Gy', 'cGy', '%')."""
    if not units:
        return unknown_units
    return _dose_aliases.get(units.strip().lower(), unknown_units)


def is_absolute_volume_units(units):
    """Return True for units that describe an absolute volume."""
    return parse_volume_units(units) in ('cm3', 'mm3')


class VolumeValue(object):
    """Class that stores a volume with the appropriate units."""

    __slots__ = ('_value', '_units', '_error')

    def __init__(self, value, units=abs_volume_units,
                 error=config.volume_error):
        """Initialization for a volume value that will also store units.

        Parameters
        ----------
        value : number
            Magnitude of the volume
        units : str, optional
            Volume units, i.e. 'cm3', 'mm3' or relative units '%'
        error : float, optional
            Absolute tolerance used when comparing two volumes
        """
        object.__setattr__(self, '_value', float(value))
        object.__setattr__(self, '_units', parse_volume_units(units))
        object.__setattr__(self, '_error', error)

    @property
    def value(self):
        return self._value

    @property
    def units(self):
        return self._units

    @property
    def error(self):
        return self._error

    def __setattr__(self, name, value):
        raise AttributeError("'VolumeValue' object is immutable")

    def __repr__(self):
        """Representation of the volume value."""
        return "VolumeValue(" + self.value.__repr__() + \
            ", '" + self.units + "')"

    def __str__(self):
        """String representation of the volume value."""
        if math.isnan(self.value):
            return 'N/A ' + self.units
        return format(self.value, '0.2f') + ' ' + self.units

    def __eq__(self, other):
        """Comparison method between two VolumeValue objects.

        Parameters
        ----------
        other : VolumeValue
            Other VolumeValue object to compare with

        Returns
        -------
        Bool
            True if the units match and the values lie within the tolerance
        """
        if not isinstance(other, VolumeValue):
            return NotImplemented
        if self.units != other.units:
            return False
        if math.isnan(self.value) and math.isnan(other.value):
            return True
        return abs(self.value - other.value) < self.error

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    __hash__ = None

    def _check_units(self, other):
        if self.units != other.units:
            raise ValueError(
                "Incompatible volume units: '%s' and '%s'" %
                (self.units, other.units))

    def _new(self, value):
        return VolumeValue(value, self.units, self.error)

    def __add__(self, other):
        self._check_units(other)
        return self._new(self.value + other.value)

    def __sub__(self, other):
        self._check_units(other)
        return self._new(self.value - other.value)

    def __mul__(self, scalar):
        if not isinstance(scalar, numbers.Real):
            return NotImplemented
        return self._new(self.value * scalar)

    __rmul__ = __mul__

    def __truediv__(self, other):
        if isinstance(other, VolumeValue):
            # Ratio of two volumes is unitless
            self._check_units(other)
            return self.value / other.value
        if not isinstance(other, numbers.Real):
            return NotImplemented
        return self._new(self.value / other)

    def __neg__(self):
        return self._new(-self.value)

    def __float__(self):
        return self.value

    def __lt__(self, other):
        self._check_units(other)
        return self.value < other.value

    def __le__(self, other):
        self._check_units(other)
        return self.value <= other.value

    def __gt__(self, other):
        self._check_units(other)
        return self.value > other.value

    def __ge__(self, other):
        self._check_units(other)
        return self.value >= other.value

    @property
    def is_relative(self):
        """Return True if the volume is expressed in percent."""
        return self.units == relative_units


def cm3(value):
    """Return a volume in cubic centimeters."""
    return VolumeValue(value, 'cm3')


def mm3(value):
    """Return a volume in cubic millimeters."""
    return VolumeValue(value, 'mm3')


def percent(value):
    """Return a relative volume in percent."""
    return VolumeValue(value, relative_units)
