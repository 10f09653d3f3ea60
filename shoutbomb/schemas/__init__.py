#!/usr/bin/env python
"""
    Schemas for Shoutbomb, the records passed between the stages of
    the renewal eligibility engine.

    :copyright: (c) 2025 by AUTHORS
    :license: see LICENSE for more details
"""

from shoutbomb.schemas.loan import LoanRecord
from shoutbomb.schemas.hold import HoldCandidate
from shoutbomb.schemas.decision import DecisionResult
from shoutbomb.schemas.scope import EvaluationScope
from shoutbomb.schemas.notice import CourtesyNotice

__all__ = ["LoanRecord", "HoldCandidate", "DecisionResult", "EvaluationScope", "CourtesyNotice"]
