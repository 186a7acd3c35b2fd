"""
Signed, expiring action tokens for email links.

A token authorizes one action (for example ``accept`` or ``cancel``) on
one reservation. It is verified statelessly: a token is
valid while its HMAC signature matches and its expiry is in the future.

Wire format (URL query parameter ``token``)::

    base64url(JSON {"data": "<payload json>", "signature": "<hex hmac>"})

where the payload is ``{"id": ..., "action": ..., "exp": <epoch ms>}``.
"""

import base64
import binascii
import enum
import hashlib
import hmac
import json
import time
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from django.conf import settings

from core.exceptions import InvalidToken


class TokenAction:
    ACCEPT = 'accept'
    DECLINE = 'decline'
    COMPLETE = 'complete'
    CANCEL = 'cancel'
    NO_EXPERIENCE = 'no-experience'
    ACCEPT_PROPOSED = 'accept-proposed'
    DECLINE_PROPOSED = 'decline-proposed'


class TokenStatus(enum.Enum):
    OK = 'ok'
    MALFORMED = 'malformed'
    SIGNATURE_MISMATCH = 'signature_mismatch'
    EXPIRED = 'expired'


@dataclass(frozen=True)
class TokenPayload:
    subject_id: str
    action: str
    expires_at_ms: int

    def to_json(self) -> str:
        return json.dumps(
            {'id': self.subject_id, 'action': self.action, 'exp': self.expires_at_ms},
            separators=(',', ':'),
        )


@dataclass(frozen=True)
class TokenCheck:
    """Outcome of inspecting a token; ``payload`` is set unless malformed."""

    status: TokenStatus
    payload: Optional[TokenPayload] = None

    @property
    def is_valid(self) -> bool:
        return self.status is TokenStatus.OK


def _now_ms() -> int:
    return int(time.time() * 1000)


def _sign(data: str, secret: Optional[str] = None) -> str:
    key = (secret or settings.TOKEN_SECRET).encode('utf-8')
    return hmac.new(key, data.encode('utf-8'), hashlib.sha256).hexdigest()


def _b64encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).rstrip(b'=').decode('ascii')


def _b64decode(value: str) -> bytes:
    padding = '=' * (-len(value) % 4)
    return base64.urlsafe_b64decode(value + padding)


def sign_payload(payload: TokenPayload, secret: Optional[str] = None) -> str:
    data = payload.to_json()
    envelope = json.dumps({'data': data, 'signature': _sign(data, secret)}, separators=(',', ':'))
    return _b64encode(envelope.encode('utf-8'))


def issue_token(subject_id, action: str, ttl: timedelta, now_ms: Optional[int] = None) -> str:
    """Issue a token for ``action`` on ``subject_id`` valid for ``ttl``."""
    issued_at = _now_ms() if now_ms is None else now_ms
    expires_at_ms = issued_at + int(ttl.total_seconds() * 1000)
    return sign_payload(TokenPayload(str(subject_id), action, expires_at_ms))


def issue_token_until(subject_id, action: str, expires_at: datetime) -> str:
    """Issue a token that expires at an absolute, timezone-aware datetime."""
    return sign_payload(TokenPayload(str(subject_id), action, int(expires_at.timestamp() * 1000)))


def inspect_token(token: str, now_ms: Optional[int] = None, secret: Optional[str] = None) -> TokenCheck:
    """
    Decode and check a token, reporting exactly why it is invalid.

    Only for internal use and tests; callers facing untrusted clients use
    :func:`verify_token`, which collapses every failure into one error.
    """
    try:
        envelope = json.loads(_b64decode(token).decode('utf-8'))
        data = envelope['data']
        signature = envelope['signature']
        if not isinstance(data, str) or not isinstance(signature, str):
            return TokenCheck(TokenStatus.MALFORMED)
        raw = json.loads(data)
        payload = TokenPayload(str(raw['id']), str(raw['action']), int(raw['exp']))
    except (ValueError, TypeError, KeyError, binascii.Error, UnicodeDecodeError):
        return TokenCheck(TokenStatus.MALFORMED)

    if not hmac.compare_digest(signature.encode('utf-8'), _sign(data, secret).encode('utf-8')):
        return TokenCheck(TokenStatus.SIGNATURE_MISMATCH, payload)

    current = _now_ms() if now_ms is None else now_ms
    if payload.expires_at_ms < current:
        return TokenCheck(TokenStatus.EXPIRED, payload)

    return TokenCheck(TokenStatus.OK, payload)


def verify_token(token: Optional[str], action: Optional[str] = None, subject_id=None,
                 now_ms: Optional[int] = None) -> TokenPayload:
    """
    Return the payload of a valid token or raise ``InvalidToken``.

    When ``action`` / ``subject_id`` are given the token must carry exactly
    those values; a mismatch is reported like any other invalid token.
    """
    if not token:
        raise InvalidToken('Missing token.')

    check = inspect_token(token, now_ms=now_ms)
    if not check.is_valid:
        raise InvalidToken()

    payload = check.payload
    if action is not None and payload.action != action:
        raise InvalidToken()
    if subject_id is not None and payload.subject_id != str(subject_id):
        raise InvalidToken()
    return payload


def generate_accept_token(reservation_id, expires_in_hours: int = 48) -> str:
    return issue_token(reservation_id, TokenAction.ACCEPT, timedelta(hours=expires_in_hours))


def generate_decline_token(reservation_id, expires_in_hours: int = 48) -> str:
    return issue_token(reservation_id, TokenAction.DECLINE, timedelta(hours=expires_in_hours))


def generate_complete_token(reservation_id, expires_in_days: Optional[int] = None) -> str:
    days = expires_in_days if expires_in_days is not None else settings.COMPLETE_TOKEN_DAYS
    return issue_token(reservation_id, TokenAction.COMPLETE, timedelta(days=days))


def generate_cancel_token(reservation_id, experience_start: datetime) -> str:
    """Cancel links stop working when the cancellation window closes."""
    closes_at = experience_start - timedelta(days=settings.CANCELLATION_WINDOW_DAYS)
    return issue_token_until(reservation_id, TokenAction.CANCEL, closes_at)


def generate_no_experience_token(reservation_id, expires_in_days: Optional[int] = None) -> str:
    days = expires_in_days if expires_in_days is not None else settings.COMPLETE_TOKEN_DAYS
    return issue_token(reservation_id, TokenAction.NO_EXPERIENCE, timedelta(days=days))


def generate_accept_proposed_token(reservation_id, expires_in_hours: int = 48) -> str:
    """One token covers every proposed slot; the slot index travels as ``?slot=``."""
    return issue_token(reservation_id, TokenAction.ACCEPT_PROPOSED, timedelta(hours=expires_in_hours))


def generate_decline_proposed_token(reservation_id, expires_in_hours: int = 48) -> str:
    return issue_token(reservation_id, TokenAction.DECLINE_PROPOSED, timedelta(hours=expires_in_hours))
