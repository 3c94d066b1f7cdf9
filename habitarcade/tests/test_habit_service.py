"""
Tests for HabitService and SettingsService.
"""
import pytest
from datetime import date, datetime

from habitarcade.schemas import HabitCreate, HabitUpdate, SettingsUpdate
from habitarcade.services.habit_service import HabitService
from habitarcade.services.settings_service import SettingsService
from habitarcade.exceptions import HabitNotFoundException, ValidationException
from habitarcade.tests.factories import make_habit


class TestHabitCrud:

    def test_create_and_get(self, db_session):
        service = HabitService(db_session)

        habit = service.create_habit(HabitCreate(name="Read", daily_target=3))

        assert service.get_habit(habit.id).name == "Read"

    def test_update_ignores_null_for_required_fields(self, db_session):
        habit = make_habit(db_session, "Read", icon="book")

        updated = HabitService(db_session).update_habit(habit.id, HabitUpdate(name=None, icon=None))

        assert updated.name == "Read"
        assert updated.icon is None

    def test_soft_delete_and_restore(self, db_session):
        habit = make_habit(db_session)
        service = HabitService(db_session)

        service.delete_habit(habit.id)
        assert service.get_habits() == []
        assert len(service.get_habits(include_deleted=True)) == 1

        restored = service.restore_habit(habit.id)
        assert restored.is_deleted is False
        assert restored.deleted_at is None

    def test_deleted_habit_cannot_be_updated(self, db_session):
        root = make_habit(db_session, "Root")
        habit = make_habit(db_session, "Gone", is_deleted=True)

        with pytest.raises(HabitNotFoundException):
            HabitService(db_session).update_habit(habit.id, HabitUpdate(parent_habit_id=root.id))

        db_session.refresh(habit)
        assert habit.parent_habit_id is None

    def test_get_missing(self, db_session):
        with pytest.raises(HabitNotFoundException):
            HabitService(db_session).get_habit(5)


class TestLogEntry:

    def test_status_derived_from_count(self, db_session, default_settings):
        habit = make_habit(db_session, daily_target=3)
        service = HabitService(db_session)

        assert service.log_entry(habit.id, date(2024, 1, 1), count=1).status == "partial"
        assert service.log_entry(habit.id, date(2024, 1, 1), count=3).status == "complete"

    def test_explicit_status_wins(self, db_session, default_settings):
        habit = make_habit(db_session, daily_target=3)

        entry = HabitService(db_session).log_entry(habit.id, date(2024, 1, 1), status="exempt", count=3)

        assert entry.status == "exempt"

    def test_unknown_status(self, db_session, default_settings):
        habit = make_habit(db_session)

        with pytest.raises(ValidationException):
            HabitService(db_session).log_entry(habit.id, date(2024, 1, 1), status="wat")

    def test_deleted_habit_rejected(self, db_session, default_settings):
        habit = make_habit(db_session, is_deleted=True)

        with pytest.raises(HabitNotFoundException):
            HabitService(db_session).log_entry(habit.id, date(2024, 1, 1), status="complete")

    def test_today_window(self, db_session, default_settings):
        result = HabitService(db_session).get_today(now=datetime(2024, 2, 1, 5, 0))

        assert result["effective_date"] == date(2024, 1, 31)
        assert result["day_starts_at"] == datetime(2024, 1, 31, 6, 0)
        assert result["day_ends_at"] == datetime(2024, 2, 1, 6, 0)


class TestSettingsService:

    def test_defaults_created_on_first_read(self, db_session):
        settings = SettingsService(db_session).get()

        assert settings.day_boundary_hour == 6
        assert settings.auto_fill_enabled is False

    def test_update_day_boundary(self, db_session):
        service = SettingsService(db_session)

        service.update(SettingsUpdate(day_boundary_hour=0))

        assert service.get_effective_date(datetime(2024, 2, 1, 0, 30)) == date(2024, 2, 1)

    def test_unknown_auto_fill_status(self, db_session):
        with pytest.raises(ValidationException):
            SettingsService(db_session).update(SettingsUpdate(auto_fill_status="nope"))

    def test_reset(self, db_session):
        service = SettingsService(db_session)
        service.update(SettingsUpdate(day_boundary_hour=3, theme="light"))

        settings = service.reset()

        assert settings.day_boundary_hour == 6
        assert settings.theme == "dark"
