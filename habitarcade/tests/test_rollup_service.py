"""
Tests for derived parent habit statuses.
"""
import pytest
from datetime import date

from habitarcade.models import HabitEntry
from habitarcade.services.rollup_service import RollupService, derive_status
from habitarcade.exceptions import HabitNotFoundException
from habitarcade.tests.factories import make_habit, add_entry


class TestDeriveStatus:
    """Tests for derive_status"""

    def test_no_children(self):
        assert derive_status([]) == "empty"

    def test_nobody_logged(self):
        assert derive_status([None, "empty", None]) == "empty"

    def test_all_complete(self):
        assert derive_status(["complete", "complete"]) == "complete"

    def test_missed_and_nothing_pending(self):
        assert derive_status(["complete", "missed"]) == "missed"

    def test_missed_with_pending_child_is_partial(self):
        assert derive_status(["missed", None]) == "partial"

    def test_some_complete(self):
        assert derive_status(["complete", None]) == "partial"

    def test_other_statuses_partial(self):
        assert derive_status(["complete", "exempt"]) == "partial"


class TestRollupService:
    """Tests for RollupService"""

    @pytest.fixture
    def family(self, db_session):
        parent = make_habit(db_session, "Morning routine")
        first = make_habit(db_session, "Stretch", parent_habit_id=parent.id)
        second = make_habit(db_session, "Journal", parent_habit_id=parent.id)
        return parent, first, second

    def test_rollup_single_date(self, db_session, family):
        parent, first, second = family
        add_entry(db_session, first.id, date(2024, 1, 1), status="complete")
        add_entry(db_session, second.id, date(2024, 1, 1), status="complete")

        assert RollupService(db_session).rollup(parent.id, date(2024, 1, 1)) == "complete"

    def test_rollup_range(self, db_session, family):
        parent, first, second = family
        add_entry(db_session, first.id, date(2024, 1, 1), status="complete")
        add_entry(db_session, second.id, date(2024, 1, 1), status="missed")
        add_entry(db_session, first.id, date(2024, 1, 2), status="complete")

        result = RollupService(db_session).rollup_range(parent.id, date(2024, 1, 1), date(2024, 1, 3))

        assert result == {
            date(2024, 1, 1): "missed",
            date(2024, 1, 2): "partial",
            date(2024, 1, 3): "empty",
        }

    def test_deleted_child_ignored(self, db_session, family):
        parent, first, second = family
        second.is_deleted = True
        db_session.commit()
        add_entry(db_session, first.id, date(2024, 1, 1), status="complete")

        assert RollupService(db_session).rollup(parent.id, date(2024, 1, 1)) == "complete"

    def test_never_stored(self, db_session, family):
        parent, first, _ = family
        add_entry(db_session, first.id, date(2024, 1, 1), status="complete")

        RollupService(db_session).rollup(parent.id, date(2024, 1, 1))

        assert db_session.query(HabitEntry).filter(HabitEntry.habit_id == parent.id).count() == 0

    def test_missing_parent(self, db_session):
        with pytest.raises(HabitNotFoundException):
            RollupService(db_session).rollup(123, date(2024, 1, 1))
