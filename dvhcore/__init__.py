#!/usr/bin/env python
# -*- coding: utf-8 -*-
# __init__.py
"""Package initialization for dvh-core."""
# Copyright (c) 2025 dvh-core contributors
# This file is part of dvh-core, released under a BSD license.
#    See the file license.txt included with this distribution.

__version__ = '0.1.0'
__version_info__ = (0, 1, 0)
