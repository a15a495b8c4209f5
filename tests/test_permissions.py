"""Tests for member capability levels."""

from conftest import make_member, make_settings
from warden.util import permissions

SETTINGS = make_settings(
    mentor_role_ids=frozenset({1}),
    helper_role_ids=frozenset({2}),
    moderator_role_ids=frozenset({3}),
    ignored_role_ids=frozenset({4}),
)


def level(**kwargs):
    return permissions.permission_level(make_member(**kwargs), SETTINGS)


def test_regular_member():
    assert level() == permissions.USER


def test_role_levels():
    assert level(role_ids=[1]) == permissions.MENTOR
    assert level(role_ids=[2]) == permissions.HELPER
    assert level(role_ids=[1, 2]) == permissions.HELPER
    assert level(role_ids=[3]) == permissions.MODERATOR


def test_ignored_role_wins_over_helper():
    assert level(role_ids=[2, 4]) == permissions.IGNORED


def test_moderator_permissions():
    assert level(manage_guild=True) == permissions.MODERATOR
    assert level(moderate_members=True) == permissions.MODERATOR
    assert level(role_ids=[4], moderate_members=True) == permissions.MODERATOR


def test_administrator():
    assert level(administrator=True, role_ids=[4]) == permissions.ADMINISTRATOR


def test_missing_member():
    assert permissions.permission_level(None, SETTINGS) == permissions.USER


def test_member_role_ids():
    assert permissions.member_role_ids(make_member(role_ids=[5, 6])) == [5, 6]
