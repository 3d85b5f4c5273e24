"""Integration tests for manual spreadsheet sync endpoints."""
import httpx
import pytest

from eventsync.db.models import Event, ProblemStatement


@pytest.mark.integration
class TestSyncAccess:

    def test_requires_admin(self, client, fake_sheets, event):
        response = client.post(f"/api/v1/admin/sync/events/{event.id}/spreadsheet")

        assert response.status_code == 401
        assert fake_sheets.calls == []


@pytest.mark.integration
class TestEventSync:

    def test_ensure_spreadsheet(self, admin_client, fake_sheets, db_session, event):
        response = admin_client.post(f"/api/v1/admin/sync/events/{event.id}/spreadsheet")

        assert response.status_code == 200
        assert response.json() == {"event_id": event.id, "spreadsheet_id": "sheet-1"}
        db_session.expire_all()
        assert db_session.get(Event, event.id).sheet_id == "sheet-1"

    def test_ensure_spreadsheet_twice_calls_gateway_once(self, admin_client, fake_sheets, event):
        admin_client.post(f"/api/v1/admin/sync/events/{event.id}/spreadsheet")
        admin_client.post(f"/api/v1/admin/sync/events/{event.id}/spreadsheet")

        assert fake_sheets.actions == ["syncEvent"]

    def test_ensure_spreadsheet_unknown_event(self, admin_client, fake_sheets):
        response = admin_client.post("/api/v1/admin/sync/events/missing/spreadsheet")

        assert response.status_code == 404
        assert fake_sheets.calls == []

    def test_gateway_error_returns_502(self, admin_client, fake_sheets, event):
        fake_sheets.replies["syncEvent"] = {"status": 500, "error": "Quota exceeded"}

        response = admin_client.post(f"/api/v1/admin/sync/events/{event.id}/spreadsheet")

        assert response.status_code == 502
        assert "Quota exceeded" in response.json()["detail"]

    def test_sync_all_registrations(self, admin_client, fake_sheets, event):
        fake_sheets.replies["syncAllRegistrations"] = {"status": 200, "success": True, "count": 3}

        response = admin_client.post(f"/api/v1/admin/sync/events/{event.id}/registrations")

        assert response.status_code == 200
        assert response.json()["message"] == "Registrations synced"
        assert fake_sheets.calls == [{"action": "syncAllRegistrations", "eventId": event.id}]

    def test_sync_all_unknown_event(self, admin_client, fake_sheets):
        assert admin_client.post("/api/v1/admin/sync/events/missing/registrations").status_code == 404


@pytest.mark.integration
class TestProblemSync:

    def test_ensure_tab_records_tab_name(self, admin_client, fake_sheets, db_session, event, problem):
        response = admin_client.post(
            f"/api/v1/admin/sync/events/{event.id}/problems/{problem.id}/tab"
        )

        assert response.status_code == 200
        assert fake_sheets.calls == [
            {"action": "syncProblem", "eventId": event.id, "problemId": problem.id}
        ]
        db_session.expire_all()
        assert db_session.get(ProblemStatement, problem.id).sheet_tab_name == "Problem"

    def test_ensure_tab_wrong_event(self, admin_client, db_session, problem):
        response = admin_client.post(
            f"/api/v1/admin/sync/events/other-event/problems/{problem.id}/tab"
        )
        assert response.status_code == 404

    def test_add_problem_statement(self, admin_client, fake_sheets, event, problem):
        response = admin_client.post(
            f"/api/v1/admin/sync/events/{event.id}/problems/{problem.id}/add"
        )

        assert response.status_code == 200
        assert fake_sheets.actions == ["syncEvent", "addProblemStatement"]
        assert fake_sheets.calls[1]["problemStatement"] == {"title": "Smart Campus"}
        assert fake_sheets.calls[1]["spreadsheetId"] == "sheet-1"


@pytest.mark.integration
class TestRegistrationSync:

    def test_sync_registration(self, admin_client, fake_sheets, registration):
        response = admin_client.post(f"/api/v1/admin/sync/registrations/{registration.id}")

        assert response.status_code == 200
        assert response.json()["success"] is True
        assert fake_sheets.calls == [{"action": "syncRegistration", "registrationId": registration.id}]

    def test_append_registration(self, admin_client, fake_sheets, registration):
        response = admin_client.post(f"/api/v1/admin/sync/registrations/{registration.id}/append")

        assert response.status_code == 200
        assert fake_sheets.actions == ["syncEvent", "syncProblem", "syncRegistration"]

    def test_append_unknown_registration(self, admin_client, fake_sheets):
        response = admin_client.post("/api/v1/admin/sync/registrations/missing/append")

        assert response.status_code == 404
        assert fake_sheets.calls == []

    def test_unreachable_gateway(self, admin_client, fake_sheets, registration):
        def refuse(body):
            raise httpx.ConnectError("connection refused")

        fake_sheets.replies["syncRegistration"] = refuse

        response = admin_client.post(f"/api/v1/admin/sync/registrations/{registration.id}")

        assert response.status_code == 502


@pytest.mark.integration
class TestBulkSync:

    def test_bulk_sync_sends_all_events(self, admin_client, fake_sheets, event, problem):
        response = admin_client.post("/api/v1/admin/sync/bulk")

        assert response.status_code == 200
        assert response.json()["message"] == "Synced 1 events"
        assert fake_sheets.calls == [
            {
                "action": "bulkSync",
                "events": [
                    {
                        "id": event.id,
                        "name": "Hack Night",
                        "sheet_id": None,
                        "problem_statements": [
                            {"id": problem.id, "title": "Smart Campus", "sheet_tab_name": None}
                        ],
                    }
                ],
            }
        ]

    def test_bulk_sync_already_running(self, admin_client, fake_sheets, coordinator):
        assert coordinator.inflight.acquire("bulkSync:global")

        response = admin_client.post("/api/v1/admin/sync/bulk")

        assert response.status_code == 409
        assert response.json()["detail"] == "Bulk sync already in progress"
        assert fake_sheets.calls == []


@pytest.mark.integration
class TestInFlightStats:

    def test_empty(self, admin_client):
        response = admin_client.get("/api/v1/admin/sync/inflight")

        assert response.status_code == 200
        data = response.json()
        assert data["size"] == 0
        assert data["entries"] == {}
        assert data["stale"] == []

    def test_lists_held_keys(self, admin_client, coordinator):
        coordinator.inflight.acquire("syncReg:abc")

        data = admin_client.get("/api/v1/admin/sync/inflight").json()

        assert data["size"] == 1
        assert list(data["entries"]) == ["syncReg:abc"]
        assert data["acquired"] == 1
