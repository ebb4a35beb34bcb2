from datetime import timedelta

import pytest

from unishare.application.dtos.user_dtos import LoginUserDto
from unishare.application.result import ErrorKind
from unishare.application.use_cases.login_user import LoginUserUseCase
from unishare.domain.entities.user import User
from unishare.domain.services.login_attempt_guard import LOCK_TIME, MAX_LOGIN_ATTEMPTS, LoginAttemptGuard
from unishare.domain.value_objects.email import Email

from conftest import PASSWORD


@pytest.fixture
def login(uow, notifications, clock):
    use_case = LoginUserUseCase(uow, notifications, clock=clock)

    async def _login(email="student@uni.edu", password=PASSWORD):
        return await use_case.execute(LoginUserDto(email=email, password=password), client_ip="10.0.0.7")

    return _login


async def _stored(uow, user):
    async with uow:
        return await uow.users.get_by_id(user.id)


async def test_successful_login_returns_tokens_and_notifies(login, make_user, notifications, clock):
    await make_user()

    result = await login()

    assert result.ok
    assert result.data.tokens.access_token
    assert result.data.user.last_login == clock.now
    assert notifications.categories() == ["login"]
    assert "10.0.0.7" in notifications.last("login").html_body


async def test_unknown_email_is_invalid_credential(login):
    result = await login(email="nobody@uni.edu")

    assert result.kind == ErrorKind.INVALID_CREDENTIAL


async def test_failures_count_down_remaining_attempts(login, make_user, uow):
    user = await make_user()

    for expected_remaining in (4, 3, 2, 1):
        result = await login(password="wrong-pass1")
        assert result.kind == ErrorKind.INVALID_CREDENTIAL
        assert result.detail["remaining_attempts"] == expected_remaining

    stored = await _stored(uow, user)
    assert stored.login_attempts == 4
    assert stored.lock_until is None


async def test_fifth_failure_locks_for_two_hours(login, make_user, uow, notifications, clock):
    user = await make_user()
    for _ in range(MAX_LOGIN_ATTEMPTS - 1):
        await login(password="wrong-pass1")

    result = await login(password="wrong-pass1")

    assert result.kind == ErrorKind.ACCOUNT_LOCKED
    assert result.detail["remaining_attempts"] == 0
    assert result.detail["lock_until"] == clock.now + LOCK_TIME
    assert (await _stored(uow, user)).lock_until == clock.now + LOCK_TIME
    assert notifications.categories().count("account_locked") == 1


async def test_locked_account_refuses_correct_password_without_counting(login, make_user, uow, clock):
    user = await make_user()
    for _ in range(MAX_LOGIN_ATTEMPTS):
        await login(password="wrong-pass1")
    clock.advance(timedelta(minutes=30))

    result = await login()

    assert result.kind == ErrorKind.ACCOUNT_LOCKED
    assert (await _stored(uow, user)).login_attempts == MAX_LOGIN_ATTEMPTS


async def test_lock_expires_and_success_resets_counters(login, make_user, uow, clock):
    user = await make_user()
    for _ in range(MAX_LOGIN_ATTEMPTS):
        await login(password="wrong-pass1")
    clock.advance(LOCK_TIME + timedelta(seconds=1))

    result = await login()

    assert result.ok
    stored = await _stored(uow, user)
    assert stored.login_attempts == 0
    assert stored.lock_until is None


async def test_failure_after_expired_lock_starts_a_new_count(login, make_user, uow, clock):
    user = await make_user()
    for _ in range(MAX_LOGIN_ATTEMPTS):
        await login(password="wrong-pass1")
    clock.advance(LOCK_TIME + timedelta(seconds=1))

    result = await login(password="wrong-pass1")

    assert result.kind == ErrorKind.INVALID_CREDENTIAL
    assert result.detail["remaining_attempts"] == MAX_LOGIN_ATTEMPTS - 1
    stored = await _stored(uow, user)
    assert stored.login_attempts == 1
    assert stored.lock_until is None


async def test_success_clears_partial_failures(login, make_user, uow):
    user = await make_user()
    await login(password="wrong-pass1")
    await login(password="wrong-pass1")

    assert (await login()).ok
    assert (await _stored(uow, user)).login_attempts == 0


async def test_google_only_account_is_told_to_use_google(login, uow):
    user = User.create_from_google(Email("g@uni.edu"), "Gina Google", google_id="google-sub-1")
    async with uow:
        await uow.users.add(user)
        await uow.commit()

    result = await login(email="g@uni.edu", password="whatever1")

    assert result.kind == ErrorKind.INVALID_CREDENTIAL
    assert "Google" in result.message
    assert (await _stored(uow, user)).login_attempts == 0


async def test_guard_reports_lock_once_under_repeated_failures(uow, make_user, clock):
    user = await make_user()
    guard = LoginAttemptGuard(uow.users, max_attempts=2)

    async with uow:
        first = await guard.record_failure(user, clock.now)
        second = await guard.record_failure(user, clock.now)
        third = await guard.record_failure(user, clock.now)
        await uow.commit()

    assert not first.locked
    assert second.just_locked and second.locked
    assert third.locked and not third.just_locked
    assert third.attempts == 3
