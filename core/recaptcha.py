"""Server-side verification of reCAPTCHA v3 tokens."""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

import requests
from django.conf import settings

logger = logging.getLogger(__name__)


class RecaptchaUnavailable(Exception):
    """The verification service could not be reached or answered with an error."""


@dataclass
class RecaptchaResult:
    success: bool
    score: Optional[float] = None
    error: str = ''
    error_codes: List[str] = field(default_factory=list)
    disabled: bool = False


def verify_recaptcha(token: str, remote_ip: Optional[str] = None) -> RecaptchaResult:
    """
    Verify ``token`` with Google and apply ``RECAPTCHA_MIN_SCORE``.

    Without ``RECAPTCHA_SECRET_KEY`` verification is disabled and every
    token passes.
    """
    secret = settings.RECAPTCHA_SECRET_KEY
    if not secret:
        logger.warning("⚠️ [RECAPTCHA] RECAPTCHA_SECRET_KEY is not set; verification is disabled")
        return RecaptchaResult(success=True, disabled=True)

    data = {'secret': secret, 'response': token}
    if remote_ip:
        data['remoteip'] = remote_ip

    try:
        response = requests.post(settings.RECAPTCHA_VERIFY_URL, data=data, timeout=settings.RECAPTCHA_TIMEOUT)
    except requests.exceptions.RequestException as e:
        logger.error(f"❌ [RECAPTCHA] Verification request failed: {e}")
        raise RecaptchaUnavailable(str(e)) from e

    if response.status_code != 200:
        logger.error(f"❌ [RECAPTCHA] HTTP {response.status_code} from verification service")
        raise RecaptchaUnavailable(f"HTTP {response.status_code}")

    payload = response.json()
    if not payload.get('success'):
        return RecaptchaResult(
            success=False,
            error='Verification failed',
            error_codes=payload.get('error-codes', []),
        )

    score = payload.get('score') or 0.0
    if score < settings.RECAPTCHA_MIN_SCORE:
        logger.info(f"🤖 [RECAPTCHA] Score {score} below {settings.RECAPTCHA_MIN_SCORE}")
        return RecaptchaResult(success=False, score=score, error='Score too low')

    return RecaptchaResult(success=True, score=score)
