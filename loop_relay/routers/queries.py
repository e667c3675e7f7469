"""
loop_relay/routers/queries.py

On-demand query endpoints.
- GET /query/{command}: plain-text poll for scripts and dashboards
- POST /interactions: Discord HTTP interactions endpoint for slash commands
"""

import json

import structlog
from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import PlainTextResponse
from nacl.exceptions import BadSignatureError
from nacl.signing import VerifyKey

from config import Settings
from loop_relay.dependencies import get_settings, get_store
from loop_relay.services.dispatcher import dispatch
from loop_relay.services.store import SnapshotStore

logger = structlog.get_logger(__name__)

router = APIRouter()

# Discord interaction and response types
INTERACTION_PING: int = 1
INTERACTION_APPLICATION_COMMAND: int = 2
RESPONSE_PONG: int = 1
RESPONSE_CHANNEL_MESSAGE: int = 4


def verify_discord_signature(
    public_key: str,
    signature: str,
    timestamp: str,
    body: bytes,
) -> bool:
    """Check the Ed25519 signature Discord attaches to every interaction."""
    try:
        VerifyKey(bytes.fromhex(public_key)).verify(
            timestamp.encode() + body, bytes.fromhex(signature)
        )
    except (BadSignatureError, ValueError):
        return False
    return True


@router.get("/query/{command}", response_class=PlainTextResponse)
async def poll_query(
    command: str,
    store: SnapshotStore = Depends(get_store),
) -> str:
    return dispatch(command, store)


@router.post("/interactions")
async def discord_interaction(
    request: Request,
    store: SnapshotStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> dict:
    """
    Answer Discord slash-command interactions.

    Signature verification is skipped when DISCORD_PUBLIC_KEY is unset,
    which only makes sense behind a trusted proxy or in development.
    """
    body = await request.body()

    if settings.discord_public_key:
        signature = request.headers.get("X-Signature-Ed25519", "")
        timestamp = request.headers.get("X-Signature-Timestamp", "")
        if not verify_discord_signature(
            settings.discord_public_key, signature, timestamp, body
        ):
            logger.warning("interaction_signature_invalid")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="invalid request signature",
            )

    try:
        interaction = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="invalid JSON")
    if not isinstance(interaction, dict):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="invalid JSON")

    interaction_type = interaction.get("type")
    if interaction_type == INTERACTION_PING:
        return {"type": RESPONSE_PONG}

    if interaction_type == INTERACTION_APPLICATION_COMMAND:
        data = interaction.get("data")
        command = str(data.get("name") or "") if isinstance(data, dict) else ""
        reply = dispatch(command, store)
        logger.info("interaction_answered", command=command)
        return {"type": RESPONSE_CHANNEL_MESSAGE, "data": {"content": reply}}

    logger.warning("interaction_type_unsupported", interaction_type=interaction_type)
    raise HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail="unsupported interaction type",
    )
