from fastapi import APIRouter

from event_signup.config import settings
from event_signup.constants import APP_SETTINGS

router = APIRouter()

@router.get("/")
def health_check():
    return {
        "status": "ok",
        "version": APP_SETTINGS.VERSION,
        "form_configured": bool(settings.FORM_ID),
    }
