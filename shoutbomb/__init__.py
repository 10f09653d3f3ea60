#!/usr/bin/env python

"""
    Shoutbomb courtesy notice renewal eligibility engine

    :copyright: (c) 2025 by AUTHORS
    :license: see LICENSE for more details
"""

__version__ = '0.1.0'
