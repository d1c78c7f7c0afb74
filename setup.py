#!/usr/bin/env python
# -*- coding: utf-8 -*-
# setup.py
"""setup.py for dvh-core."""
# Copyright (c) 2025 dvh-core contributors
# This file is part of dvh-core, released under a BSD license.
#    See the file license.txt included with this distribution.

from setuptools import setup

with open('README.rst') as readme_file:
    readme = readme_file.read()

test_requirements = [
    "pytest>=6.0"
]

setup(
    name='dvh-core',
    version='0.1.0',
    description="Dose volume histogram calculation, conversion and " +
                "dose / volume metrics for radiation therapy",
    long_description=readme,
    author="dvh-core contributors",
    packages=[
        'dvhcore',
    ],
    package_dir={'dvhcore':
                 'dvhcore'},
    include_package_data=True,
    python_requires='>=3.7',
    install_requires=[
        "numpy>=1.15"
    ],
    extras_require={
        'test': test_requirements
    },
    license="BSD License",
    zip_safe=False,
    keywords=[
        'dvh-core',
        'dvhcore',
        'dose volume histogram'
    ],
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Developers',
        'Intended Audience :: Healthcare Industry',
        'Intended Audience :: Science/Research',
        'License :: OSI Approved :: BSD License',
        'Natural Language :: English',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.8',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
        'Topic :: Scientific/Engineering :: Medical Science Apps.',
        'Topic :: Scientific/Engineering :: Physics'
    ],
    test_suite='tests',
)
