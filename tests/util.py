"""Helper data for test modules."""
from dvhcore import dvhcalc
from dvhcore.dvh import DVHPoint
from dvhcore.quantity import cm3, percent


# Per-voxel doses (Gy) of a small structure
SAMPLE_DOSES = [
    34, 26, 24, 19, 7,
    28, 24, 22, 14, 6,
    24, 23, 22, 14, 6,
    19, 21, 14, 8, 3,
    19, 14, 9, 8, 2]

# 100 rounded samples drawn from N(70, 3)
GAUSSIAN_DOSES = [
    73.27, 68.25, 70.74, 67.51, 72.69, 70.41, 72.27, 71.71, 69.56, 68.89,
    64.57, 65.44, 69.67, 68.30, 73.41, 67.47, 64.95, 69.62, 69.85, 70.34,
    68.91, 68.49, 68.59, 69.79, 69.94, 67.33, 72.37, 70.32, 74.29, 73.50,
    70.59, 65.71, 75.28, 68.75, 69.22, 62.87, 73.52, 70.48, 71.17, 74.91,
    72.68, 68.20, 70.35, 73.59, 65.52, 75.64, 67.77, 70.93, 66.66, 73.61,
    70.45, 69.69, 71.50, 69.38, 66.83, 69.63, 70.53, 67.19, 67.44, 66.78,
    65.24, 69.33, 72.26, 76.80, 67.23, 74.73, 70.47, 67.42, 71.45, 66.31,
    70.31, 67.65, 70.23, 73.17, 73.15, 69.90, 66.67, 69.98, 61.75, 71.23,
    62.10, 74.10, 69.48, 67.33, 66.71, 71.19, 67.66, 72.37, 70.31, 71.32,
    67.95, 69.97, 65.94, 72.49, 69.70, 70.24, 67.54, 74.01, 63.85, 70.05]

# Exported cumulative DVH in relative volume, 1 Gy bins
EXPORTED_DOSES = [0, 1, 2, 3, 4, 5, 6, 7, 8, 9, 10]
EXPORTED_PERCENT = [100, 100, 100, 95, 80, 60, 30, 10, 2, 0.5, 0]
EXPORTED_TOTAL_VOLUME = 50.0
EXPORTED_MAX_DOSE = 9.6
EXPORTED_MIN_DOSE = 2.1


def sample_dvh(voxel_volume=1, bin_width=5, dvh_type='cumulative'):
    """Create a DVH of the sample doses."""
    return dvhcalc.from_dose_matrix(
        SAMPLE_DOSES, cm3(voxel_volume), 'Gy', bin_width=bin_width,
        dvh_type=dvh_type, name='sample')


def exported_points():
    """Return the exported DVH as a list of relative volume points."""
    return [DVHPoint(d, percent(v))
            for d, v in zip(EXPORTED_DOSES, EXPORTED_PERCENT)]


def exported_dvh():
    """Create a cumulative DVH from the exported table."""
    return dvhcalc.from_dvh_points(
        exported_points(), EXPORTED_MAX_DOSE, EXPORTED_MIN_DOSE,
        cm3(EXPORTED_TOTAL_VOLUME), 'Gy', name='exported')
