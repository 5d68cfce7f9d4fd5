"""
Webhook routes.

GET answers the subscription handshake; POST receives event deliveries.
Both only ever answer 200 or 403 with a plain body.
"""

from fastapi import APIRouter, BackgroundTasks, Query, Request, Response
from fastapi.responses import PlainTextResponse

from wacall.api.controllers import WebhookController
from wacall.webhooks import SIGNATURE_HEADER


def create_webhook_router(controller: WebhookController) -> APIRouter:
    """
    Create the webhook router delegating to a controller.

    Args:
        controller: WebhookController wired with the app's collaborators

    Returns:
        APIRouter with the verification and event endpoints
    """
    router = APIRouter(
        prefix="/webhook",
        tags=["Webhooks"],
        responses={403: {"description": "Forbidden - Authentication failed"}},
    )

    @router.get("", response_class=PlainTextResponse)
    async def verify_webhook(
        hub_mode: str | None = Query(None, alias="hub.mode"),
        hub_verify_token: str | None = Query(None, alias="hub.verify_token"),
        hub_challenge: str | None = Query(None, alias="hub.challenge"),
    ):
        """
        Handle webhook verification (challenge-response).

        Returns the challenge verbatim as text/plain on success, an empty 403
        otherwise.
        """
        result = controller.verify_subscription(
            hub_mode, hub_verify_token, hub_challenge
        )
        if not result.accepted:
            return Response(status_code=403)
        return PlainTextResponse(content=result.body, status_code=200)

    @router.post("")
    async def receive_webhook(request: Request, background_tasks: BackgroundTasks):
        """
        Receive an event delivery.

        The body is read raw (never re-serialized) for signature validation.
        Processing is scheduled as a background task, which Starlette runs
        only after this response has been sent.
        """
        raw_body = await request.body()
        signature = request.headers.get(SIGNATURE_HEADER)

        if not controller.acknowledge(raw_body, signature):
            return Response(status_code=403)

        background_tasks.add_task(controller.process, raw_body)
        return Response(status_code=200)

    return router
