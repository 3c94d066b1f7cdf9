"""
Settings repository - Data access layer for Settings model.
"""
from sqlalchemy.orm import Session
from habitarcade.models import Settings


class SettingsRepository:
    """Repository for Settings data access"""

    @staticmethod
    def get(db: Session) -> Settings:
        """
        Get settings (creates with defaults if not exists).

        Returns:
            Settings object
        """
        settings = db.query(Settings).first()
        if not settings:
            settings = Settings()
            db.add(settings)
            db.commit()
            db.refresh(settings)
        return settings

    @staticmethod
    def update(db: Session, settings: Settings) -> Settings:
        """Commit changes made to the settings row"""
        db.commit()
        db.refresh(settings)
        return settings

    @staticmethod
    def delete_all(db: Session) -> None:
        """Drop the settings row; it is recreated with defaults on next read"""
        db.query(Settings).delete()
        db.commit()
