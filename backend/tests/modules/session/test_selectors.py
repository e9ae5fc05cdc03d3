from modules.session.models import AuthState
from modules.session.selectors import (
    select_is_session_expired,
    select_user,
    select_user_display_info,
    select_user_id,
)
from tests.conftest import FixedClock, T0
from tests.modules.session.conftest import EXPIRES


def test_select_user(signed_in, identity):
    assert select_user(signed_in) == identity
    assert select_user(AuthState()) is None


def test_select_user_id(signed_in):
    assert select_user_id(signed_in) == "user-123"
    assert select_user_id(AuthState()) is None


class TestDisplayInfo:
    def test_uses_display_name(self, signed_in):
        info = select_user_display_info(signed_in)
        assert info.display_name == "Player One"
        assert info.username == "player_one"

    def test_falls_back_to_username(self, signed_in):
        user = signed_in.current_user.model_copy(update={"display_name": None})
        state = signed_in.model_copy(update={"current_user": user})

        assert select_user_display_info(state).display_name == "player_one"

    def test_anonymous(self):
        assert select_user_display_info(AuthState()) is None


class TestIsSessionExpired:
    def test_anonymous_is_expired(self):
        assert select_is_session_expired(AuthState(), FixedClock()) is True

    def test_within_window(self, signed_in):
        assert select_is_session_expired(signed_in, FixedClock(T0 + 60)) is False

    def test_after_window(self, signed_in):
        clock = FixedClock(EXPIRES.timestamp() + 1)
        assert select_is_session_expired(signed_in, clock) is True
