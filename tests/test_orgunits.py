#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
    tests.test_orgunits
    ~~~~~~~~~~~~~~~~~~~

    Library shortname resolution and org unit descendants.

    :copyright: (c) 2025 by Authors.
    :license: see LICENSE for more details.
"""

import pytest
from unittest.mock import patch
from shoutbomb.core.orgunits import resolve_org_units, get_descendants
from shoutbomb.core.exceptions import OrgUnitNotFoundError, ConfigurationError


@pytest.fixture
def tree(ils):
    system = ils.org("SYS")
    branch = ils.org("BR1", parent=system)
    ils.org("BM1", parent=branch)
    ils.org("BR2", parent=system)
    ils.org("OTHER")
    return system


def test_resolve_by_shortname_ignores_case_and_spaces(db_session, tree):
    ids = resolve_org_units([" br1", "Br 2"], db_session=db_session)
    assert len(ids) == 2
    assert ids == sorted(ids)


def test_resolve_with_descendants_dedupes(db_session, tree):
    ids = resolve_org_units(["sys", "br1"], include_descendants=True, db_session=db_session)
    assert len(ids) == 4
    assert ids == sorted(set(ids))


def test_descendants_walk_every_level(db_session, tree):
    assert len(get_descendants(tree.id, db_session=db_session)) == 3


def test_unknown_shortnames(db_session, tree):
    with pytest.raises(OrgUnitNotFoundError):
        resolve_org_units(["nowhere"], db_session=db_session)
    with pytest.raises(ConfigurationError):
        resolve_org_units(["", "  "], db_session=db_session)


def test_strips_all_whitespace(db_session, tree):
    assert len(resolve_org_units(["BR1\t", "\nbr2 "], db_session=db_session)) == 2


def test_defaults_to_configured_libraries(db_session, tree):
    with patch("shoutbomb.core.orgunits.LIBRARY_NAMES", ["sys"]), \
            patch("shoutbomb.core.orgunits.INCLUDE_ORG_DESCENDANTS", True):
        assert len(resolve_org_units(db_session=db_session)) == 4
    with patch("shoutbomb.core.orgunits.LIBRARY_NAMES", ["sys"]), \
            patch("shoutbomb.core.orgunits.INCLUDE_ORG_DESCENDANTS", False):
        assert resolve_org_units(db_session=db_session) == [tree.id]


def test_no_configured_libraries(db_session, tree):
    with patch("shoutbomb.core.orgunits.LIBRARY_NAMES", []):
        with pytest.raises(ConfigurationError):
            resolve_org_units(db_session=db_session)
