"""Unit tests for the committed-row change feed."""
import pytest

from eventsync.db.changes import DELETE, INSERT, UPDATE, ChangeEvent, ChangeFeed, install_change_capture
from eventsync.db.models import Event, Registration


@pytest.fixture
def captured(session_factory, change_feed):
    """Install capture on the test sessionmaker and record every event."""
    install_change_capture(session_factory, change_feed)
    received = []
    for table in ("events", "problem_statements", "registrations"):
        change_feed.subscribe(table, received.append)
    return received


@pytest.mark.unit
class TestChangeFeed:

    def test_publish_reaches_table_subscribers_only(self):
        feed = ChangeFeed()
        events, registrations = [], []
        feed.subscribe("events", events.append)
        feed.subscribe("registrations", registrations.append)

        change = ChangeEvent(table="events", event_type=INSERT, new={"id": "e1"})
        feed.publish(change)

        assert events == [change]
        assert registrations == []

    def test_unsubscribe(self):
        feed = ChangeFeed()
        received = []
        unsubscribe = feed.subscribe("events", received.append)
        assert feed.subscriber_count("events") == 1

        unsubscribe()
        feed.publish(ChangeEvent(table="events", event_type=INSERT))

        assert received == []
        assert feed.subscriber_count("events") == 0

    def test_failing_handler_does_not_stop_delivery(self):
        feed = ChangeFeed()
        received = []

        def broken(change):
            raise RuntimeError("handler bug")

        feed.subscribe("events", broken)
        feed.subscribe("events", received.append)

        feed.publish(ChangeEvent(table="events", event_type=INSERT))

        assert len(received) == 1


@pytest.mark.unit
class TestChangeCapture:

    def test_insert_published_after_commit(self, session_factory, captured):
        with session_factory() as session:
            session.add(Event(name="Hack Night"))
            session.flush()
            # Flushed but not committed
            assert captured == []
            session.commit()

        assert len(captured) == 1
        change = captured[0]
        assert change.table == "events"
        assert change.event_type == INSERT
        assert change.new["name"] == "Hack Night"
        assert change.new["id"]

    def test_rollback_discards_changes(self, session_factory, captured):
        with session_factory() as session:
            session.add(Event(name="Never Saved"))
            session.flush()
            session.rollback()

        assert captured == []

    def test_update_and_delete(self, session_factory, captured):
        with session_factory() as session:
            event = Event(name="Hack Night")
            session.add(event)
            session.commit()

            event.name = "Hack Day"
            session.commit()

            session.delete(event)
            session.commit()

        assert [c.event_type for c in captured] == [INSERT, UPDATE, DELETE]
        assert captured[1].new["name"] == "Hack Day"

    def test_bulk_update_bypasses_feed(self, session_factory, captured, registration):
        captured.clear()
        with session_factory() as session:
            session.query(Registration).filter(Registration.id == registration.id).update(
                {Registration.attendance_update_count: 1}, synchronize_session=False
            )
            session.commit()

        assert captured == []
