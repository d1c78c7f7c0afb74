#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""unittest cases for convert."""
# test_convert.py
# Copyright (c) 2025 dvh-core contributors


import unittest
from numpy import arange
from numpy.testing import assert_allclose, assert_array_equal
from dvhcore import convert
from dvhcore.dvh import DVH, DVHPoint
from dvhcore.exceptions import (
    InsufficientDataError, NonUniformBinningError, UndefinedBinWidthError)
from dvhcore.quantity import cm3, percent
from .util import exported_dvh, sample_dvh


class TestConvert(unittest.TestCase):
    """Unit tests for cumulative / differential conversion."""

    def setUp(self):
        """Set up DVHs for common case testing."""
        self.cdvh = sample_dvh(voxel_volume=0.345)
        self.ddvh = sample_dvh(voxel_volume=0.345, dvh_type='differential')

    def test_to_differential(self):
        """Test if a cumulative DVH converts to the calculated one."""
        converted = convert.to_differential(self.cdvh)
        self.assertEqual(converted, self.ddvh)
        self.assertIsNot(converted, self.cdvh)
        self.assertEqual(self.cdvh.dvh_type, 'cumulative')
        assert_allclose(converted.doses, arange(2.5, 40, 5))

    def test_to_cumulative(self):
        """Test if a differential DVH converts to the calculated one."""
        self.assertEqual(convert.to_cumulative(self.ddvh), self.cdvh)

    def test_round_trip(self):
        """Test if converting to differential and back is lossless."""
        for bin_width in (5, 1, 0.1):
            cdvh = sample_dvh(voxel_volume=0.345, bin_width=bin_width)
            round_trip = convert.to_cumulative(convert.to_differential(cdvh))
            self.assertEqual(round_trip, cdvh)
            assert_allclose(round_trip.doses, cdvh.doses, atol=1e-6)
            assert_allclose(round_trip.volumes, cdvh.volumes, atol=1e-6)
        exported = exported_dvh()
        self.assertEqual(exported.differential.cumulative, exported)

    def test_volume_conservation(self):
        """Test if the differential bins add up to the total volume."""
        for subject in (self.cdvh, exported_dvh()):
            diff = convert.to_differential(subject)
            self.assertAlmostEqual(
                diff.volumes.sum(), diff.total_volume.value, delta=1e-6)

    def test_properties_preserved(self):
        """Test if dose extents, source and samples survive a conversion."""
        diff = self.cdvh.differential
        self.assertEqual(diff.max_dose, self.cdvh.max_dose)
        self.assertEqual(diff.min_dose, self.cdvh.min_dose)
        self.assertEqual(diff.total_volume, self.cdvh.total_volume)
        self.assertEqual(diff.source, 'dose_matrix')
        assert_array_equal(diff.raw_samples, self.cdvh.raw_samples)
        self.assertEqual(diff.name, self.cdvh.name)

    def test_same_type(self):
        """Test if converting to the current type returns the same DVH."""
        self.assertIs(convert.to_differential(self.ddvh), self.ddvh)
        self.assertIs(convert.to_cumulative(self.cdvh), self.cdvh)
        self.assertEqual(self.cdvh.differential.differential,
                         self.cdvh.differential)

    def test_cumulative_total_recomputed(self):
        """Test if the cumulative total is the accumulated bin volume."""
        ddvh = DVH([0.5, 1.5, 2.5], [1, 2, 3], dvh_type='differential',
                   total_volume=cm3(7))
        cdvh = convert.to_cumulative(ddvh)
        assert_allclose(cdvh.doses, [0, 1, 2])
        assert_allclose(cdvh.volumes, [6, 5, 3])
        self.assertEqual(cdvh.total_volume, cm3(6))

    def test_non_uniform_bins(self):
        """Test if a curve with uneven bin spacing is rejected."""
        subject = DVH([0, 1, 2, 4], [4, 3, 2, 1])
        with self.assertRaises(NonUniformBinningError) as cm:
            convert.to_differential(subject)
        self.assertEqual(cm.exception.index, 2)
        self.assertEqual(cm.exception.delta, 2)
        self.assertIsInstance(cm.exception, ValueError)

    def test_small_spacing_error_accepted(self):
        """Test if spacing deviations within the tolerance are accepted."""
        subject = DVH([0, 1, 2 + 1e-8, 3], [4, 3, 2, 1])
        assert_allclose(convert.to_differential(subject).volumes,
                        [1, 1, 1, 1])

    def test_undefined_bin_width(self):
        """Test if a single point curve has no bin width."""
        subject = DVH([0], [1])
        with self.assertRaises(UndefinedBinWidthError):
            convert.to_differential(subject)
        with self.assertRaises(InsufficientDataError):
            convert.get_bin_width(subject)
        with self.assertRaises(UndefinedBinWidthError):
            convert.to_cumulative(subject.replace(dvh_type='differential'))


class TestNormalizeVolume(unittest.TestCase):
    """Unit tests for volume normalization."""

    def setUp(self):
        """Set up DVHs for common case testing."""
        self.cdvh = sample_dvh(voxel_volume=0.345)
        self.ddvh = sample_dvh(voxel_volume=0.345, dvh_type='differential')

    def test_normalized_points(self):
        """Test if every volume is expressed in percent of the total."""
        for subject in (self.cdvh, self.ddvh):
            normalized = convert.normalize_volume(subject)
            total = subject.total_volume.value
            for point, original in zip(normalized.curve, subject.curve):
                self.assertEqual(point, DVHPoint(
                    original.dose,
                    percent(100.0 * original.volume.value / total)))

    def test_normalized_metadata(self):
        """Test if units change while totals and extents are kept."""
        normalized = self.cdvh.relative_volume
        self.assertTrue(normalized.normalized)
        self.assertFalse(self.cdvh.normalized)
        self.assertEqual(normalized.volume_units, '%')
        self.assertEqual(normalized.total_volume, self.cdvh.total_volume)
        self.assertEqual(normalized.max_dose, self.cdvh.max_dose)
        self.assertEqual(normalized.min_dose, self.cdvh.min_dose)
        self.assertAlmostEqual(normalized.volumes[0], 100)
        self.assertIs(normalized.relative_volume, normalized)

    def test_normalized_conversion(self):
        """Test if a normalized DVH keeps its total when made cumulative."""
        normalized = self.ddvh.relative_volume
        cdvh = normalized.cumulative
        self.assertTrue(cdvh.normalized)
        self.assertEqual(cdvh.total_volume, self.ddvh.total_volume)
        self.assertAlmostEqual(cdvh.volumes[0], 100)
        self.assertEqual(cdvh, self.cdvh.relative_volume)

    def test_double_normalization_warning(self):
        """Test if normalizing twice is reported."""
        normalized = convert.normalize_volume(self.cdvh)
        with self.assertLogs('dvhcore.convert', level='WARNING'):
            convert.normalize_volume(normalized)


if __name__ == '__main__':
    import sys
    sys.exit(unittest.main())
