"""Unit tests for the attendance service and its update counter."""
import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Query

import eventsync.services.attendance as attendance_service
from eventsync.core.exceptions import LimitExceededError, NotFoundError
from eventsync.db.models import Attendance, Registration
from eventsync.services.attendance import (
    get_event_attendance_overview,
    get_team_attendance,
    get_team_attendance_url,
    toggle_attendance,
)
from eventsync.services.problems import create_problem
from eventsync.services.registrations import submit_registration


def _presence(db_session, registration_id):
    db_session.expire_all()
    rows = db_session.query(Attendance).filter(Attendance.registration_id == registration_id).all()
    return {row.member_name: row.is_present for row in rows}


def _count(db_session, registration_id):
    db_session.expire_all()
    return db_session.get(Registration, registration_id).attendance_update_count


@pytest.mark.unit
class TestToggleAttendance:

    def test_first_toggle_marks_present(self, db_session, registration):
        result = toggle_attendance(db_session, registration.reg_code, "Ada", expected_count=0)

        assert result == {
            "member_name": "Ada",
            "is_present": True,
            "attendance_update_count": 1,
            "remaining_updates": 1,
        }
        assert _presence(db_session, registration.id) == {"Ada": True}
        assert _count(db_session, registration.id) == 1

    def test_losing_toggle_interleaved_with_winner(self, db_session, session_factory, registration, monkeypatch):
        """The winner's counter update lands between the loser's upsert and its own."""
        toggle_attendance(db_session, registration.reg_code, "Grace", expected_count=0)
        real_set_presence = attendance_service._set_presence
        raced = []

        def set_presence_then_race(db, registration_id, member_name, is_present):
            real_set_presence(db, registration_id, member_name, is_present)
            if not raced:
                raced.append(member_name)
                with session_factory() as other:
                    toggle_attendance(other, registration.reg_code, "Linus", expected_count=1)

        monkeypatch.setattr(attendance_service, "_set_presence", set_presence_then_race)

        with pytest.raises(LimitExceededError, match="concurrent updates") as exc_info:
            toggle_attendance(db_session, registration.reg_code, "Ada", expected_count=1)

        assert raced == ["Ada"]
        assert exc_info.value.attendance_update_count == 2
        assert _count(db_session, registration.id) == 2
        assert _presence(db_session, registration.id) == {"Grace": True, "Ada": False, "Linus": True}

    def test_failed_counter_update_restores_presence(self, db_session, registration, monkeypatch):
        def database_locked(*args, **kwargs):
            raise OperationalError("UPDATE registrations", {}, Exception("database is locked"))

        monkeypatch.setattr(Query, "update", database_locked)

        with pytest.raises(OperationalError):
            toggle_attendance(db_session, registration.reg_code, "Ada", expected_count=0)

        assert _presence(db_session, registration.id) == {"Ada": False}
        assert _count(db_session, registration.id) == 0

    def test_second_toggle_flips_back(self, db_session, registration):
        toggle_attendance(db_session, registration.reg_code, "Ada", expected_count=0)
        result = toggle_attendance(db_session, registration.reg_code, "Ada", expected_count=1)

        assert result["is_present"] is False
        assert result["remaining_updates"] == 0
        assert _presence(db_session, registration.id) == {"Ada": False}
        # One row per member
        assert db_session.query(Attendance).count() == 1

    def test_limit_reached_writes_nothing(self, db_session, registration):
        with pytest.raises(LimitExceededError, match="limit reached") as exc_info:
            toggle_attendance(db_session, registration.reg_code, "Ada", expected_count=2)

        assert exc_info.value.attendance_update_count == 2
        assert _presence(db_session, registration.id) == {}
        assert _count(db_session, registration.id) == 0

    def test_stale_expected_count_is_reverted(self, db_session, registration):
        """Two clients both saw count=1; only the first toggle is kept."""
        toggle_attendance(db_session, registration.reg_code, "Ada", expected_count=0)

        winner = toggle_attendance(db_session, registration.reg_code, "Linus", expected_count=1)
        assert winner["attendance_update_count"] == 2

        with pytest.raises(LimitExceededError, match="concurrent updates") as exc_info:
            toggle_attendance(db_session, registration.reg_code, "Grace", expected_count=1)

        assert exc_info.value.attendance_update_count == 2
        assert _count(db_session, registration.id) == 2
        # Grace's presence was rolled back to absent
        assert _presence(db_session, registration.id) == {"Ada": True, "Linus": True, "Grace": False}

    def test_reverted_toggle_restores_previous_presence(self, db_session, registration):
        toggle_attendance(db_session, registration.reg_code, "Ada", expected_count=0)

        with pytest.raises(LimitExceededError):
            toggle_attendance(db_session, registration.reg_code, "Ada", expected_count=0)

        assert _presence(db_session, registration.id) == {"Ada": True}
        assert _count(db_session, registration.id) == 1

    def test_custom_limit(self, db_session, registration):
        for count in range(3):
            toggle_attendance(db_session, registration.reg_code, "Ada", expected_count=count, limit=3)

        with pytest.raises(LimitExceededError):
            toggle_attendance(db_session, registration.reg_code, "Ada", expected_count=3, limit=3)

    def test_unknown_member(self, db_session, registration):
        with pytest.raises(ValueError, match="not part of this team"):
            toggle_attendance(db_session, registration.reg_code, "Mallory", expected_count=0)
        assert _count(db_session, registration.id) == 0

    def test_unknown_code(self, db_session):
        with pytest.raises(NotFoundError, match="Registration not found"):
            toggle_attendance(db_session, "nosuchcode", "Ada", expected_count=0)


@pytest.mark.unit
class TestTeamAttendance:

    def test_view_lists_every_member(self, db_session, registration):
        toggle_attendance(db_session, registration.reg_code, "Linus", expected_count=0)

        view = get_team_attendance(db_session, registration.reg_code)

        assert view["registration"].id == registration.id
        assert view["members"] == [
            {"member_name": "Ada", "is_present": False},
            {"member_name": "Linus", "is_present": True},
            {"member_name": "Grace", "is_present": False},
        ]
        assert view["attendance_update_count"] == 1
        assert view["remaining_updates"] == 1

    def test_attendance_url(self, db_session, registration):
        assert get_team_attendance_url(db_session, registration.reg_code) == f"/attendance/{registration.reg_code}"

    def test_attendance_url_unknown_code(self, db_session):
        with pytest.raises(NotFoundError):
            get_team_attendance_url(db_session, "nosuchcode")


@pytest.mark.unit
class TestEventAttendanceOverview:

    def test_overview_totals(self, db_session, event, problem, registration):
        other_problem = create_problem(db_session, event.id, "Green Energy")
        other = submit_registration(db_session, event.id, other_problem.id, "Bit Flippers", ["Alan", "Joan"])
        toggle_attendance(db_session, registration.reg_code, "Ada", expected_count=0)
        toggle_attendance(db_session, other.reg_code, "Joan", expected_count=0)

        overview = get_event_attendance_overview(db_session, event.id)

        assert overview["event_name"] == "Hack Night"
        assert overview["total_teams"] == 2
        assert overview["total_members"] == 5
        assert overview["total_present"] == 2
        # Ordered by team name
        assert [team["team_name"] for team in overview["teams"]] == ["Bit Flippers", "Null Pointers"]

    def test_overview_filtered_by_problem(self, db_session, event, problem, registration):
        other_problem = create_problem(db_session, event.id, "Green Energy")
        submit_registration(db_session, event.id, other_problem.id, "Bit Flippers", ["Alan"])

        overview = get_event_attendance_overview(db_session, event.id, problem.id)

        assert overview["total_teams"] == 1
        assert overview["teams"][0]["reg_code"] == registration.reg_code
        assert overview["problem_statement_id"] == problem.id

    def test_overview_unknown_event(self, db_session):
        with pytest.raises(NotFoundError, match="Event not found"):
            get_event_attendance_overview(db_session, "missing")
