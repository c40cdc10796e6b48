"""
batch.py — codes for many accounts at once.

One bad secret must not hide the codes of the other accounts, so each
account's OTPError is captured into its CodeResult instead of propagating.
"""

import asyncio
from typing import Iterable, List, Optional

from .errors import OTPError
from .models import Account, CodeResult
from .otp_core import DEFAULT_TIME_STEP, generate, generate_async

NOTIFICATION_TITLE = "Authentication codes"


def _result(account: Account, code: Optional[str] = None,
            error: Optional[Exception] = None) -> CodeResult:
    return CodeResult(
        name=account.name,
        code=code,
        error=None if error is None else str(error),
        account_id=account.id,
    )


def generate_codes(accounts: Iterable[Account], now_unix_seconds: int,
                   time_step_seconds: int = DEFAULT_TIME_STEP, provider=None) -> List[CodeResult]:
    """Generate one CodeResult per account, in input order."""
    results = []
    for account in accounts:
        try:
            code = generate(account.secret, now_unix_seconds, time_step_seconds, provider)
        except OTPError as e:
            results.append(_result(account, error=e))
        else:
            results.append(_result(account, code=code))
    return results


async def generate_codes_async(accounts: Iterable[Account], now_unix_seconds: int,
                               time_step_seconds: int = DEFAULT_TIME_STEP,
                               provider=None, timeout: float = None) -> List[CodeResult]:
    """Concurrent variant of generate_codes(); result order still follows input order."""
    accounts = list(accounts)
    outcomes = await asyncio.gather(
        *(generate_async(a.secret, now_unix_seconds, time_step_seconds, provider, timeout)
          for a in accounts),
        return_exceptions=True,
    )
    results = []
    for account, outcome in zip(accounts, outcomes):
        if isinstance(outcome, OTPError):
            results.append(_result(account, error=outcome))
        elif isinstance(outcome, BaseException):
            raise outcome
        else:
            results.append(_result(account, code=outcome))
    return results


def format_notification(results: Iterable[CodeResult]) -> str:
    """'name: code' lines for every successful result, joined by newlines."""
    return "\n".join(r.line() for r in results if r.ok)
