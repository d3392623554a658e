"""
Token verification.
"""

from __future__ import annotations

import logging

from core import errors

from . import schemas, security

logger = logging.getLogger(__name__)


def _claim_str(payload: dict, name: str) -> str | None:
    value = payload.get(name)
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        return None
    text = str(value).strip()
    return text or None


def verify(credential: str) -> schemas.IdentityClaim:
    """
    Turn a bearer token into an identity claim.

    The subject is read from the `id` claim, falling back to `sub`. Every
    failure (bad signature, expired, no usable subject) is reported as
    `InvalidCredential`; the cause is only logged.
    """
    try:
        payload = security.decode_token(credential)
    except security.AuthSecurityError as exc:
        logger.debug("token_rejected reason=%s", exc.__cause__ or exc)
        raise errors.InvalidCredential() from exc

    subject = _claim_str(payload, "id") or _claim_str(payload, "sub")
    if subject is None:
        logger.debug("token_rejected reason=missing_subject")
        raise errors.InvalidCredential()

    return schemas.IdentityClaim(id=subject, email=_claim_str(payload, "email"))
