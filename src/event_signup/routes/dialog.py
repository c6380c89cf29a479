from fastapi import APIRouter, Depends

from event_signup.dependencies import get_configuration_manager
from event_signup.signup.configuration import ConfigurationManager
from event_signup.signup.dialog import get_dialog_data
from event_signup.signup.dto import dump_dialog_data

router = APIRouter()


@router.get("/")
def dialog_data(manager: ConfigurationManager = Depends(get_configuration_manager)):
    """Status payload that populates the management dialog."""
    return dump_dialog_data(get_dialog_data(manager))
