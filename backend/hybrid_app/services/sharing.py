"""Share-link tokens for project snapshots.

A token is the snapshot serialised as compact JSON and encoded as URL-safe
base64 with padding stripped.  Nothing is stored server-side.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging

from pydantic import ValidationError

from hybrid_app.schemas.project import ProjectSnapshot

logger = logging.getLogger(__name__)


class InvalidShareTokenError(ValueError):
    pass


def encode_snapshot(snapshot: ProjectSnapshot) -> str:
    payload = json.dumps(snapshot.model_dump(), separators=(",", ":")).encode("utf-8")
    return base64.urlsafe_b64encode(payload).decode("ascii").rstrip("=")


def decode_snapshot(token: str) -> ProjectSnapshot:
    """Decode *token* back into a validated snapshot.

    Raises
    ------
    InvalidShareTokenError
        If the token is not base64, not JSON, or fails validation.
    """
    padded = token + "=" * (-len(token) % 4)
    try:
        raw = base64.urlsafe_b64decode(padded.encode("ascii"))
        data = json.loads(raw.decode("utf-8"))
        return ProjectSnapshot.model_validate(data)
    except (binascii.Error, UnicodeError, ValueError, ValidationError) as exc:
        logger.info("Rejected share token: %s", type(exc).__name__)
        raise InvalidShareTokenError("Invalid share token") from exc
