import logging
from typing import Optional

from fastapi import APIRouter, Depends

from event_signup.dependencies import get_optional_submission_handler
from event_signup.forms.dto import FormSubmitEvent, PubSubPushEnvelope
from event_signup.signup.submission import SubmissionHandler

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/", status_code=202)
def form_submitted(
    event: FormSubmitEvent,
    handler: Optional[SubmissionHandler] = Depends(get_optional_submission_handler),
):
    """
    Platform entry point, called once per form response.

    Always accepted: the handler logs and drops anything it cannot process.
    """
    if handler is None:
        logger.warning("Dropping form submission: handler unavailable.")
        return {"status": "accepted"}
    handler(event)
    return {"status": "accepted"}


@router.post("/notifications", status_code=202)
def form_watch_notification(
    envelope: PubSubPushEnvelope,
    handler: Optional[SubmissionHandler] = Depends(get_optional_submission_handler),
):
    """
    Pub/Sub push endpoint for the form's submission watch.

    Always acknowledged, so Pub/Sub does not redeliver notifications the
    handler already logged and dropped.
    """
    if handler is None:
        logger.warning("Dropping form notification: handler unavailable.")
        return {"status": "accepted", "processed": 0}
    processed = handler.handle_notification(envelope)
    return {"status": "accepted", "processed": processed}
