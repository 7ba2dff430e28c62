"""API handler for Clerk user webhooks."""

import logging
from typing import Any

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from src.usersync.config import settings
from src.usersync.features.users import (
    MissingExternalIdError,
    create_user,
    delete_user,
    update_user,
)
from src.usersync.services import ClerkClient, SyncAnalytics, get_clerk_client
from src.usersync.webhooks.events import (
    SessionEvent,
    UserCreatedEvent,
    UserDeletedEvent,
    UserUpdatedEvent,
    parse_event,
)
from src.usersync.webhooks.exceptions import (
    MissingSignatureHeadersError,
    WebhookVerificationFailed,
)
from src.usersync.webhooks.verification import (
    SVIX_ID_HEADER,
    WebhookVerifier,
    extract_signature_headers,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["webhooks"])


def _message(message: str, status_code: int = status.HTTP_200_OK, **extra: Any) -> JSONResponse:
    return JSONResponse({"message": message, **extra}, status_code=status_code)


@router.post(settings.webhook_path)
async def clerk_webhook(
    request: Request,
    clerk: ClerkClient = Depends(get_clerk_client),
) -> Response:
    """
    Receive a Clerk webhook delivery and sync the local user record.

    Flow: check the Svix headers, verify the signature over the raw body,
    then dispatch on the event type. Session events are acknowledged and
    ignored; user.created / user.updated / user.deleted map onto the
    corresponding persistence call.

    Args:
        request: Incoming request (raw body is needed for verification)
        clerk: Clerk Backend API client, used to write the new record id back

    Returns:
        200 on success or ignored events, 400 for rejected deliveries,
        500 if a downstream call fails

    Raises:
        WebhookConfigurationError: If WEBHOOK_SECRET is not configured
    """
    verifier = WebhookVerifier(settings.webhook_secret)

    try:
        signature_headers = extract_signature_headers(request.headers)
    except MissingSignatureHeadersError as e:
        logger.warning(str(e), extra={"error_type": "missing_svix_headers"})
        return PlainTextResponse("Missing Svix headers", status_code=status.HTTP_400_BAD_REQUEST)

    body = await request.body()
    svix_id = signature_headers[SVIX_ID_HEADER]

    try:
        payload = verifier.verify(body, signature_headers)
    except WebhookVerificationFailed as e:
        logger.warning(
            f"Error verifying webhook {svix_id}: {e}",
            extra={"error_type": "invalid_signature", "svix_id": svix_id},
        )
        SyncAnalytics().track_verification_failure(svix_id, reason=str(e))
        return PlainTextResponse(
            "Invalid webhook signature", status_code=status.HTTP_400_BAD_REQUEST
        )

    event = parse_event(payload)

    if isinstance(event, SessionEvent):
        logger.info(f"Ignoring session event: {event.type}", extra={"svix_id": svix_id})
        return PlainTextResponse("Ignored", status_code=status.HTTP_200_OK)

    try:
        if isinstance(event, UserCreatedEvent):
            return await _handle_user_created(event, clerk)
        if isinstance(event, UserUpdatedEvent):
            return _handle_user_updated(event)
        if isinstance(event, UserDeletedEvent):
            return _handle_user_deleted(event)
    except Exception as e:
        logger.error(
            f"Error processing webhook {svix_id} ({event.type}): {e}",
            exc_info=True,
            extra={"error_type": "webhook_processing_failed", "svix_id": svix_id},
        )
        return _message("Internal server error", status.HTTP_500_INTERNAL_SERVER_ERROR)

    logger.warning(f"Unhandled webhook event type: {event.type!r}", extra={"svix_id": svix_id})
    return PlainTextResponse("Unhandled event type", status_code=status.HTTP_400_BAD_REQUEST)


async def _handle_user_created(event: UserCreatedEvent, clerk: ClerkClient) -> JSONResponse:
    data = event.data
    if not data.has_full_name:
        logger.error(
            f"Missing firstName or lastName in user.created event for {data.id}",
            extra={"error_type": "missing_name_fields"},
        )
        return _message("Missing firstName or lastName", status.HTTP_400_BAD_REQUEST)

    # external_id is a required unique column; without it no row is written
    if not data.id:
        raise MissingExternalIdError("user.created event carries no Clerk user id")

    new_user = create_user(data.to_user_create())

    if new_user:
        await clerk.update_user_metadata(data.id, public_metadata={"userId": new_user["id"]})
        SyncAnalytics().track_user_sync(data.id, "user_created")

    return _message("User created successfully", user=new_user)


def _handle_user_updated(event: UserUpdatedEvent) -> JSONResponse:
    data = event.data
    updated_user = update_user(data.id, data.to_user_update())

    if updated_user and data.id:
        SyncAnalytics().track_user_sync(data.id, "user_updated")

    return _message("User updated successfully", user=updated_user)


def _handle_user_deleted(event: UserDeletedEvent) -> JSONResponse:
    user_id = event.data.id
    if not user_id:
        logger.error(
            "User ID is missing in user.deleted event",
            extra={"error_type": "missing_user_id"},
        )
        return _message("User ID is required", status.HTTP_400_BAD_REQUEST)

    deleted_user = delete_user(user_id)

    if deleted_user:
        SyncAnalytics().track_user_sync(user_id, "user_deleted")

    return _message("User deleted successfully", user=deleted_user)
