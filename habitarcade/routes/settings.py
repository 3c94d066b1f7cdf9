"""
Settings HTTP routes.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from habitarcade.database import get_db
from habitarcade.schemas import SettingsUpdate, SettingsResponse, SettingsBase
from habitarcade.services.settings_service import SettingsService
from habitarcade.routes.errors import CLIENT_ERRORS, to_http_exception

router = APIRouter(prefix="/api/settings", tags=["settings"])


def _with_effective_date(service: SettingsService, settings) -> SettingsResponse:
    response = SettingsResponse.model_validate(settings)
    response.effective_date = service.get_effective_date()
    return response


@router.get("", response_model=SettingsResponse)
def get_settings(db: Session = Depends(get_db)):
    """Get settings with effective date"""
    service = SettingsService(db)
    return _with_effective_date(service, service.get())


@router.put("", response_model=SettingsResponse)
def update_settings(settings_update: SettingsUpdate, db: Session = Depends(get_db)):
    """Update settings"""
    service = SettingsService(db)
    try:
        settings = service.update(settings_update)
    except CLIENT_ERRORS as e:
        raise to_http_exception(e)
    return _with_effective_date(service, settings)


@router.get("/defaults", response_model=SettingsBase)
def get_default_settings():
    """Get default settings"""
    return SettingsService.defaults()


@router.post("/reset", response_model=SettingsResponse)
def reset_settings(db: Session = Depends(get_db)):
    """Reset all settings to defaults"""
    service = SettingsService(db)
    return _with_effective_date(service, service.reset())
