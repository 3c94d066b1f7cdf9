"""
Settings service.
The only write path for day_boundary_hour; validates before persisting.
"""
from datetime import date, datetime
from typing import Optional
from sqlalchemy.orm import Session

from habitarcade.models import Settings
from habitarcade.schemas import SettingsUpdate, SettingsBase
from habitarcade.repositories.settings_repository import SettingsRepository
from habitarcade.services.date_service import DateService
from habitarcade.constants import HABIT_STATUSES
from habitarcade.exceptions import ValidationException


class SettingsService:
    """Service for application settings"""

    def __init__(self, db: Session):
        self.db = db
        self.settings_repo = SettingsRepository()
        self.date_service = DateService()

    def get(self) -> Settings:
        """Get settings (created with defaults on first access)"""
        return self.settings_repo.get(self.db)

    def get_day_boundary_hour(self) -> int:
        """Current process-wide day boundary hour"""
        return self.get().day_boundary_hour

    def get_effective_date(self, now: Optional[datetime] = None) -> date:
        """Effective today under the stored day boundary hour"""
        return self.date_service.get_effective_date(self.get_day_boundary_hour(), now)

    def update(self, settings_update: SettingsUpdate) -> Settings:
        """
        Apply a partial settings update.

        Raises:
            ValidationException: If day_boundary_hour or auto_fill_status is invalid
        """
        update_data = settings_update.model_dump(exclude_unset=True, exclude_none=True)

        if "day_boundary_hour" in update_data:
            self.date_service.validate_day_boundary_hour(update_data["day_boundary_hour"])
        if "auto_fill_status" in update_data and update_data["auto_fill_status"] not in HABIT_STATUSES:
            raise ValidationException(
                "auto_fill_status",
                f"unknown status '{update_data['auto_fill_status']}'",
                code="INVALID_STATUS"
            )

        settings = self.get()
        for key, value in update_data.items():
            setattr(settings, key, value)
        return self.settings_repo.update(self.db, settings)

    def reset(self) -> Settings:
        """Reset all settings to defaults"""
        self.settings_repo.delete_all(self.db)
        return self.get()

    @staticmethod
    def defaults() -> dict:
        """Default settings values"""
        return SettingsBase().model_dump()
