from datetime import timedelta

import pytest

from unishare.application.dtos.user_dtos import RegisterUserDto, VerifyEmailDto
from unishare.application.result import ErrorKind
from unishare.application.use_cases.email_verification_use_case import (
    EmailVerificationUseCase,
    ResendVerificationUseCase,
)
from unishare.application.use_cases.register_user import RegisterUserUseCase
from unishare.domain.exceptions import RateLimitedError
from unishare.domain.services.verification_resend_limiter import (
    DAILY_RESEND_CAP,
    RESEND_COOLDOWN,
    RESEND_WINDOW,
    VerificationResendLimiter,
)
from unishare.domain.value_objects.email import Email


async def _issue_token(uow, user, now):
    token = user.issue_verification_token(now)
    async with uow:
        await uow.users.update(user)
        await uow.commit()
    return token


async def _stored(uow, user):
    async with uow:
        return await uow.users.get_by_id(user.id)


async def test_register_issues_plaintext_token_and_emails_it(uow, notifications):
    result = await RegisterUserUseCase(uow, notifications).execute(
        RegisterUserDto(full_name="Rita Register", email="Rita@Uni.edu", password="secret123")
    )

    assert result.ok
    assert result.data.user.email == "rita@uni.edu"
    assert not result.data.user.is_verified
    async with uow:
        stored = await uow.users.get_by_email(Email("rita@uni.edu"))
    assert stored.verification is not None
    assert stored.verification.value in notifications.last("verification").html_body


async def test_register_rejects_duplicate_email_case_insensitively(uow, notifications, make_user):
    await make_user(email="dup@uni.edu")

    result = await RegisterUserUseCase(uow, notifications).execute(
        RegisterUserDto(full_name="Dup Two", email="DUP@uni.edu", password="secret123")
    )

    assert result.kind == ErrorKind.ALREADY_EXISTS


async def test_register_enforces_password_rule(uow, notifications):
    result = await RegisterUserUseCase(uow, notifications).execute(
        RegisterUserDto(full_name="Weak Pass", email="weak@uni.edu", password="abcdefg")
    )

    assert result.kind == ErrorKind.VALIDATION_ERROR


async def test_verify_marks_account_and_consumes_token(uow, notifications, clock, make_user):
    user = await make_user(verified=False)
    token = await _issue_token(uow, user, clock.now)
    verify = EmailVerificationUseCase(uow, notifications, clock=clock)

    first = await verify.execute(VerifyEmailDto(token=token))
    second = await verify.execute(VerifyEmailDto(token=token))

    assert first.ok
    assert second.kind == ErrorKind.TOKEN_INVALID_OR_EXPIRED
    stored = await _stored(uow, user)
    assert stored.is_verified
    assert stored.verification is None
    assert notifications.categories() == ["welcome"]


async def test_verification_token_expires_after_24_hours(uow, notifications, clock, make_user):
    user = await make_user(verified=False)
    token = await _issue_token(uow, user, clock.now)
    clock.advance(timedelta(hours=24, seconds=1))

    result = await EmailVerificationUseCase(uow, notifications, clock=clock).execute(VerifyEmailDto(token=token))

    assert result.kind == ErrorKind.TOKEN_INVALID_OR_EXPIRED
    assert not (await _stored(uow, user)).is_verified


async def test_unknown_token_fails_the_same_way(uow, notifications, clock):
    result = await EmailVerificationUseCase(uow, notifications, clock=clock).execute(
        VerifyEmailDto(token="0" * 64)
    )

    assert result.kind == ErrorKind.TOKEN_INVALID_OR_EXPIRED
    assert result.message == "Invalid or expired verification token"


@pytest.fixture
def resend(uow, notifications, clock):
    return ResendVerificationUseCase(uow, notifications, clock=clock)


async def test_resend_replaces_token_and_reports_remaining(resend, uow, notifications, clock, make_user):
    user = await make_user(verified=False)
    old_token = await _issue_token(uow, user, clock.now)

    result = await resend.execute(user.id)

    assert result.ok
    assert result.data.remaining_attempts == DAILY_RESEND_CAP - 1
    stored = await _stored(uow, user)
    assert stored.verification.value != old_token
    assert stored.verification.value in notifications.last("verification").html_body


async def test_resend_cooldown_reports_wait_seconds(resend, clock, make_user):
    user = await make_user(verified=False)
    await resend.execute(user.id)
    clock.advance(timedelta(seconds=30))

    result = await resend.execute(user.id)

    assert result.kind == ErrorKind.RATE_LIMITED
    assert result.detail["wait_seconds"] == 90

    clock.advance(timedelta(seconds=60))
    assert (await resend.execute(user.id)).detail["wait_seconds"] == 30


async def test_resend_cap_within_window(resend, clock, make_user):
    user = await make_user(verified=False)
    for _ in range(DAILY_RESEND_CAP):
        assert (await resend.execute(user.id)).ok
        clock.advance(RESEND_COOLDOWN)

    result = await resend.execute(user.id)

    assert result.kind == ErrorKind.RATE_LIMITED
    assert "tomorrow" in result.message


async def test_resend_window_restarts_after_24_hours(resend, uow, clock, make_user):
    user = await make_user(verified=False)
    for _ in range(DAILY_RESEND_CAP):
        await resend.execute(user.id)
        clock.advance(RESEND_COOLDOWN)
    clock.advance(RESEND_WINDOW)

    result = await resend.execute(user.id)

    assert result.ok
    assert result.data.remaining_attempts == DAILY_RESEND_CAP - 1
    assert (await _stored(uow, user)).verification_resend_count == 1


async def test_resend_refused_once_verified(resend, make_user):
    user = await make_user(verified=True)

    result = await resend.execute(user.id)

    assert result.kind == ErrorKind.INVALID_STATE


async def test_resend_claim_lost_to_a_committed_claim_is_rate_limited(resend, uow, clock, make_user):
    user = await make_user(verified=False)
    stale = await _stored(uow, user)
    assert (await resend.execute(user.id)).ok

    # The stale read still shows no resend, so only the conditional update can refuse
    async with uow:
        with pytest.raises(RateLimitedError) as exc:
            await VerificationResendLimiter(uow.users).claim(stale, clock.now)

    assert exc.value.wait_seconds == RESEND_COOLDOWN.total_seconds()
    assert (await _stored(uow, user)).verification_resend_count == 1
