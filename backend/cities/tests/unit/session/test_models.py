import pytest

from cities.logic.enums import EndReason, SessionPhase
from cities.logic.exceptions import InvalidPhaseError
from cities.logic.settings import GameSettings
from cities.logic.types import Player
from cities.session.models import GameSession

ALICE = Player(user_id="1", name="Alice")
BOB = Player(user_id="2", name="Bob")


@pytest.fixture
def session():
    return GameSession(room_id="room", settings=GameSettings(win_score=3, join_seconds=30, inactivity_seconds=60))


@pytest.fixture
def active_session(session):
    session.add_player(ALICE)
    session.add_player(BOB)
    session.begin(now=100.0)
    return session


class TestJoinPhase:
    def test_starts_joining(self, session):
        assert session.phase == SessionPhase.JOINING
        assert session.players == {}

    def test_add_player_keeps_join_order(self, session):
        assert session.add_player(BOB)
        assert session.add_player(ALICE)
        assert session.player_names == ["Bob", "Alice"]
        assert session.scores == {"2": 0, "1": 0}

    def test_duplicate_join(self, session):
        session.add_player(ALICE)
        assert not session.add_player(Player(user_id="1", name="Alice again"))
        assert session.player_names == ["Alice"]

    def test_remove_player(self, session):
        session.add_player(ALICE)
        session.waiting_notified.add("1")

        assert session.remove_player("1") == ALICE
        assert not session.has_player("1")
        assert "1" not in session.scores
        assert "1" not in session.waiting_notified

    def test_remove_absent_player(self, session):
        assert session.remove_player("404") is None

    def test_remaining_join_seconds_rounds_up(self, session):
        session.open_join_window(now=10.0)
        assert session.remaining_join_seconds(now=10.0) == 30
        assert session.remaining_join_seconds(now=25.5) == 15
        assert session.remaining_join_seconds(now=39.9) == 1

    def test_remaining_join_seconds_never_negative(self, session):
        session.open_join_window(now=0.0)
        assert session.remaining_join_seconds(now=45.0) == 0


class TestBegin:
    def test_begin_activates_and_sets_deadline(self, active_session):
        assert active_session.phase == SessionPhase.ACTIVE
        assert active_session.inactivity_deadline == 160.0
        assert active_session.roster_handle is None

    def test_begin_without_players(self, session):
        with pytest.raises(InvalidPhaseError):
            session.begin(now=0.0)

    def test_roster_frozen_after_begin(self, active_session):
        with pytest.raises(InvalidPhaseError):
            active_session.add_player(Player(user_id="3", name="Carol"))
        with pytest.raises(InvalidPhaseError):
            active_session.remove_player("1")


class TestApplyMove:
    def test_move_updates_state(self, active_session):
        move = active_session.apply_move("1", "москва")

        assert move.player == ALICE
        assert move.score == 1
        assert move.next_letter == "а"
        assert not move.wins_game
        assert active_session.last_city == "москва"
        assert active_session.used_cities == {"москва"}
        assert active_session.moves == 1
        assert active_session.score_reached_at == {"1": 1}

    def test_next_letter_skips_soft_sign(self, active_session):
        assert active_session.apply_move("2", "казань").next_letter == "н"

    def test_reaching_win_score(self, active_session):
        active_session.apply_move("1", "москва")
        active_session.apply_move("1", "астана")
        move = active_session.apply_move("1", "анапа")
        assert move.wins_game
        assert move.score == 3

    def test_move_during_join_phase(self, session):
        session.add_player(ALICE)
        with pytest.raises(InvalidPhaseError):
            session.apply_move("1", "москва")

    def test_move_by_non_player(self, active_session):
        with pytest.raises(InvalidPhaseError):
            active_session.apply_move("99", "москва")


class TestFinish:
    def test_explicit_winner(self, active_session):
        for city in ("москва", "астана", "анапа"):
            active_session.apply_move("2", city)

        result = active_session.finish(EndReason.SCORE_REACHED, winner_id="2")

        assert active_session.phase == SessionPhase.ENDED
        assert result.winner == BOB
        assert result.winner_score == 3
        assert [e.player for e in result.standings] == [BOB, ALICE]

    def test_inactivity_tie_goes_to_first_to_reach(self, active_session):
        active_session.apply_move("2", "москва")
        active_session.apply_move("1", "астана")

        result = active_session.finish(EndReason.INACTIVITY)

        assert result.winner == BOB
        assert result.winner_score == 1
        # standings keep join order for equal scores
        assert [e.player for e in result.standings] == [ALICE, BOB]

    def test_inactivity_without_moves_has_no_winner(self, active_session):
        result = active_session.finish(EndReason.INACTIVITY)
        assert result.winner is None
        assert result.winner_score == 0

    def test_finish_twice(self, active_session):
        active_session.finish(EndReason.INACTIVITY)
        with pytest.raises(InvalidPhaseError):
            active_session.finish(EndReason.INACTIVITY)
