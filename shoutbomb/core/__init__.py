#!/usr/bin/env python

"""
    Core module for Shoutbomb, the renewal eligibility engine

    :copyright: (c) 2025 by AUTHORS
    :license: see LICENSE for more details
"""
