from event_signup.signup.configuration import ConfigurationManager
from event_signup.signup.dto import DialogData


def get_dialog_data(manager: ConfigurationManager) -> DialogData:
    """Everything the management dialog needs, in one call."""
    return manager.get_status()
