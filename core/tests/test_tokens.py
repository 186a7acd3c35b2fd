"""Tests for signed action tokens."""

import base64
import json
from datetime import timedelta

from django.test import SimpleTestCase, override_settings

from core.exceptions import InvalidToken
from core.tokens import (
    TokenAction,
    TokenPayload,
    TokenStatus,
    generate_accept_token,
    inspect_token,
    issue_token,
    sign_payload,
    verify_token,
)

NOW_MS = 1_760_000_000_000
RESERVATION_ID = '2f1d4c8e-1b2a-4c3d-9e8f-0a1b2c3d4e5f'


def _decode_envelope(token):
    padded = token + '=' * (-len(token) % 4)
    return json.loads(base64.urlsafe_b64decode(padded))


def _encode_envelope(envelope):
    raw = json.dumps(envelope, separators=(',', ':')).encode('utf-8')
    return base64.urlsafe_b64encode(raw).rstrip(b'=').decode('ascii')


class TokenTestCase(SimpleTestCase):

    def test_valid_token_verifies(self):
        token = issue_token(RESERVATION_ID, TokenAction.ACCEPT, timedelta(hours=48), now_ms=NOW_MS)

        payload = verify_token(token, action=TokenAction.ACCEPT, subject_id=RESERVATION_ID, now_ms=NOW_MS + 1000)

        self.assertEqual(payload.subject_id, RESERVATION_ID)
        self.assertEqual(payload.action, TokenAction.ACCEPT)
        self.assertEqual(payload.expires_at_ms, NOW_MS + 48 * 3600 * 1000)

    def test_token_expires_after_ttl(self):
        ttl = timedelta(hours=1)
        token = issue_token(RESERVATION_ID, TokenAction.DECLINE, ttl, now_ms=NOW_MS)
        expiry = NOW_MS + 3600 * 1000

        self.assertTrue(inspect_token(token, now_ms=expiry).is_valid)
        check = inspect_token(token, now_ms=expiry + 1)
        self.assertEqual(check.status, TokenStatus.EXPIRED)
        self.assertEqual(check.payload.subject_id, RESERVATION_ID)
        with self.assertRaises(InvalidToken):
            verify_token(token, now_ms=expiry + 1)

    def test_wire_format(self):
        token = issue_token(RESERVATION_ID, TokenAction.COMPLETE, timedelta(days=14), now_ms=NOW_MS)

        self.assertNotIn('=', token)
        envelope = _decode_envelope(token)
        self.assertEqual(set(envelope), {'data', 'signature'})
        self.assertEqual(
            json.loads(envelope['data']),
            {'id': RESERVATION_ID, 'action': 'complete', 'exp': NOW_MS + 14 * 86400 * 1000},
        )
        self.assertEqual(len(envelope['signature']), 64)

    def test_tampered_payload_is_rejected(self):
        token = issue_token(RESERVATION_ID, TokenAction.ACCEPT, timedelta(hours=48), now_ms=NOW_MS)
        envelope = _decode_envelope(token)
        data = json.loads(envelope['data'])
        data['action'] = TokenAction.COMPLETE
        envelope['data'] = json.dumps(data, separators=(',', ':'))
        tampered = _encode_envelope(envelope)

        self.assertEqual(inspect_token(tampered, now_ms=NOW_MS).status, TokenStatus.SIGNATURE_MISMATCH)
        with self.assertRaises(InvalidToken):
            verify_token(tampered, now_ms=NOW_MS)

    def test_token_signed_with_another_secret_is_rejected(self):
        payload = TokenPayload(RESERVATION_ID, TokenAction.ACCEPT, NOW_MS + 1000)
        forged = sign_payload(payload, secret='not-the-server-secret')

        self.assertEqual(inspect_token(forged, now_ms=NOW_MS).status, TokenStatus.SIGNATURE_MISMATCH)

    def test_malformed_tokens(self):
        for token in ['', 'not-base64!!', 'e30', _encode_envelope({'data': 5, 'signature': 'x'}),
                      _encode_envelope({'data': '{"id": 1}', 'signature': 'x'})]:
            with self.subTest(token=token):
                self.assertEqual(inspect_token(token, now_ms=NOW_MS).status, TokenStatus.MALFORMED)

    def test_missing_token_is_invalid(self):
        with self.assertRaises(InvalidToken):
            verify_token(None)

    def test_action_and_subject_must_match(self):
        token = generate_accept_token(RESERVATION_ID)

        with self.assertRaises(InvalidToken):
            verify_token(token, action=TokenAction.COMPLETE)
        with self.assertRaises(InvalidToken):
            verify_token(token, subject_id='00000000-0000-0000-0000-000000000000')

    def test_verification_failures_share_one_message(self):
        valid = issue_token(RESERVATION_ID, TokenAction.ACCEPT, timedelta(hours=1), now_ms=NOW_MS)
        messages = set()
        for token, now in [(valid, NOW_MS + 2 * 3600 * 1000), ('garbage', NOW_MS), (valid[:-4] + 'AAAA', NOW_MS)]:
            with self.assertRaises(InvalidToken) as ctx:
                verify_token(token, now_ms=now)
            messages.add(str(ctx.exception.detail))
        self.assertEqual(len(messages), 1)

    @override_settings(TOKEN_SECRET='rotated-secret')
    def test_rotating_the_secret_invalidates_tokens(self):
        with self.settings(TOKEN_SECRET='old-secret'):
            token = issue_token(RESERVATION_ID, TokenAction.CANCEL, timedelta(days=1))

        with self.assertRaises(InvalidToken):
            verify_token(token)
