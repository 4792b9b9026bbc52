"""Tests for session and OAuth credential tracking."""

from __future__ import annotations

from Snoocore.auth import AuthState, OAuthToken


def test_fresh_state_is_anonymous() -> None:
    state = AuthState()
    assert state.is_authenticated() is False
    assert state.is_logged_in() is False
    assert state.modhash == ""
    assert state.cookie == ""
    assert state.token is None


def test_oauth_round_trip() -> None:
    state = AuthState()
    token = state.set_oauth({"access_token": "abc", "token_type": "bearer", "expires_in": 3600})

    assert state.is_authenticated() is True
    assert token.authorization == "bearer abc"

    state.clear_oauth()
    assert state.is_authenticated() is False


def test_oauth_requires_both_fields() -> None:
    state = AuthState()
    state.set_oauth({"access_token": "abc"})
    assert state.is_authenticated() is False

    state.set_oauth(OAuthToken(token_type="bearer"))
    assert state.is_authenticated() is False


def test_session_round_trip() -> None:
    state = AuthState()
    state.set_session("mh", "reddit_session=1")

    assert state.is_logged_in() is True
    assert state.cookie == "reddit_session=1"

    state.clear_session()
    assert state.is_logged_in() is False
    assert state.cookie == ""


def test_cookie_alone_is_not_logged_in() -> None:
    state = AuthState()
    state.set_session("", "reddit_session=1")
    assert state.is_logged_in() is False


def test_both_mechanisms_tracked_independently() -> None:
    state = AuthState()
    state.set_session("mh", "c=1")
    state.set_oauth({"access_token": "abc", "token_type": "bearer"})

    snapshot = state.snapshot()
    assert snapshot.is_logged_in and snapshot.is_authenticated

    state.clear_oauth()
    assert state.is_logged_in() is True
    assert state.is_authenticated() is False


def test_update_session_only_overwrites_given_pieces() -> None:
    state = AuthState()
    state.set_session("old", "c=old")

    state.update_session(modhash="new")
    assert (state.modhash, state.cookie) == ("new", "c=old")

    state.update_session(cookie="c=new")
    assert (state.modhash, state.cookie) == ("new", "c=new")


def test_snapshot_is_detached_from_later_updates() -> None:
    state = AuthState()
    state.set_session("first", "")
    snapshot = state.snapshot()

    state.set_session("second", "")
    assert snapshot.modhash == "first"


def test_token_keeps_extra_fields() -> None:
    token = OAuthToken.model_validate(
        {"access_token": "a", "token_type": "bearer", "device_id": "xyz"}
    )
    assert token.is_complete
    assert token.model_extra == {"device_id": "xyz"}
