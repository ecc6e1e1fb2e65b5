import pytest

from flashkit.services.persistence import WriteBack, decide_write_back, write_back
from flashkit.utils.flash import FlashState


@pytest.mark.parametrize("status", range(300, 309))
def test_messages_persist_on_redirect(status) -> None:
    state = FlashState().put("notice", "elixir")
    assert decide_write_back(state, status) is WriteBack.PERSIST


@pytest.mark.parametrize("status", [200, 299, 309, 404, 500])
def test_messages_are_discarded_outside_redirects(status) -> None:
    state = FlashState().put("notice", "elixir")
    assert decide_write_back(state, status) is WriteBack.DISCARD


@pytest.mark.parametrize("status", [200, 302])
def test_empty_flash_without_previous_flash_is_skipped(status) -> None:
    assert decide_write_back(FlashState(), status) is WriteBack.SKIP
    assert decide_write_back(FlashState().clear(), status) is WriteBack.SKIP


@pytest.mark.parametrize("status", [200, 302])
def test_cleared_session_flash_is_purged(status) -> None:
    state = FlashState(messages={"info": "existing"}, from_session=True).clear()
    assert decide_write_back(state, status) is WriteBack.PURGE


def test_untouched_session_flash_is_carried_over_another_redirect() -> None:
    state = FlashState(messages={"info": "existing"}, from_session=True)
    assert decide_write_back(state, 303) is WriteBack.PERSIST
    assert decide_write_back(state, 200) is WriteBack.DISCARD


def test_cookie_flash_is_consumed() -> None:
    state = FlashState(messages={"notice": "hi"}, from_cookie=True, cookie_present=True)
    assert decide_write_back(state, 200) is WriteBack.DISCARD


def test_write_back_updates_the_session(flash_config) -> None:
    session = {"user_id": 7}
    state = FlashState().put("notice", "elixir")

    assert write_back(session, state, 302, flash_config) is WriteBack.PERSIST
    assert session == {"user_id": 7, "_flash": {"notice": "elixir"}}

    assert write_back(session, state, 200, flash_config) is WriteBack.DISCARD
    assert session == {"user_id": 7}


def test_write_back_skip_leaves_session_alone(flash_config) -> None:
    session: dict = {}
    assert write_back(session, FlashState().clear(), 302, flash_config) is WriteBack.SKIP
    assert session == {}
