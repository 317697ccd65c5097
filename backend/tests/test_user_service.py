"""
SocialNet Backend — User Service Unit Tests
=============================================

What:  UserService business rules with the repositories patched out.
How:   `socialnet.services.user_service.UserRepository` (and LikeRepository)
       are replaced by mocks; the AsyncSession is the conftest mock.

What we test:
    ✅ Registration conflicts (username first, then email) and race handling
    ✅ Login: unknown email → 404, wrong password → 401, success → token
    ✅ Profile updates apply only the fields that were sent
    ✅ Token verification and liked-post pagination
    ✅ Unexpected database failures become DatabaseError
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from sqlalchemy.exc import IntegrityError

from socialnet.exceptions import (
    AuthenticationError,
    ConflictError,
    DatabaseError,
    NotFoundError,
)
from socialnet.schemas.user import UserLogin, UserRegister, UserUpdate
from socialnet.security import create_access_token
from socialnet.services.user_service import UserService


def _user_repo(**methods):
    repo = MagicMock()
    for name in ("find_by_id", "find_by_email", "find_by_username", "create", "update"):
        setattr(repo, name, AsyncMock(return_value=methods.get(name)))
    return repo


class TestRegister:
    def setup_method(self):
        self.service = UserService()
        self.data = UserRegister(
            username="alice", email="alice@example.com", password="secret123", age=30
        )

    @pytest.mark.asyncio
    async def test_register_success(self, mock_db_session, make_user):
        repo = _user_repo(create=make_user())
        with patch("socialnet.services.user_service.UserRepository", return_value=repo), \
             patch("socialnet.services.user_service.hash_password", return_value="hashed-pw"):
            result = await self.service.register(mock_db_session, self.data)

        assert result.username == "alice"
        assert not hasattr(result, "password_hash")
        created = repo.create.await_args.args[0]
        assert created["password_hash"] == "hashed-pw"
        assert "password" not in created

    @pytest.mark.asyncio
    async def test_register_duplicate_username(self, mock_db_session, make_user):
        repo = _user_repo(find_by_username=make_user())
        with patch("socialnet.services.user_service.UserRepository", return_value=repo):
            with pytest.raises(ConflictError, match="Account already exists"):
                await self.service.register(mock_db_session, self.data)
        repo.create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_register_duplicate_email(self, mock_db_session, make_user):
        repo = _user_repo(find_by_email=make_user(username="someone-else"))
        with patch("socialnet.services.user_service.UserRepository", return_value=repo):
            with pytest.raises(ConflictError, match="Email already exists"):
                await self.service.register(mock_db_session, self.data)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "driver_message, expected",
        [
            ("UNIQUE constraint failed: users.username", "Account already exists"),
            ("UNIQUE constraint failed: users.email", "Email already exists"),
            ('duplicate key value violates unique constraint "users_email_key"', "Email already exists"),
        ],
    )
    async def test_register_race_maps_integrity_error(self, mock_db_session, driver_message, expected):
        repo = _user_repo()
        repo.create.side_effect = IntegrityError("INSERT", {}, Exception(driver_message))
        with patch("socialnet.services.user_service.UserRepository", return_value=repo), \
             patch("socialnet.services.user_service.hash_password", return_value="hashed-pw"):
            with pytest.raises(ConflictError) as exc_info:
                await self.service.register(mock_db_session, self.data)
        assert exc_info.value.message == expected

    @pytest.mark.asyncio
    async def test_register_unexpected_error_wrapped(self, mock_db_session):
        repo = _user_repo()
        repo.find_by_username.side_effect = RuntimeError("connection reset")
        with patch("socialnet.services.user_service.UserRepository", return_value=repo):
            with pytest.raises(DatabaseError):
                await self.service.register(mock_db_session, self.data)


class TestLogin:
    def setup_method(self):
        self.service = UserService()
        self.data = UserLogin(email="alice@example.com", password="secret123")

    @pytest.mark.asyncio
    async def test_login_unknown_email(self, mock_db_session):
        with patch("socialnet.services.user_service.UserRepository", return_value=_user_repo()):
            with pytest.raises(NotFoundError, match="Account does not exist"):
                await self.service.login(mock_db_session, self.data)

    @pytest.mark.asyncio
    async def test_login_wrong_password(self, mock_db_session, make_user):
        repo = _user_repo(find_by_email=make_user())
        with patch("socialnet.services.user_service.UserRepository", return_value=repo), \
             patch("socialnet.services.user_service.verify_password", return_value=False):
            with pytest.raises(AuthenticationError, match="Incorrect account or password"):
                await self.service.login(mock_db_session, self.data)

    @pytest.mark.asyncio
    async def test_login_success_returns_token(self, mock_db_session, make_user):
        repo = _user_repo(find_by_email=make_user())
        with patch("socialnet.services.user_service.UserRepository", return_value=repo), \
             patch("socialnet.services.user_service.verify_password", return_value=True):
            result = await self.service.login(mock_db_session, self.data)

        assert result.user.email == "alice@example.com"
        assert result.token.count(".") == 2


class TestProfile:
    def setup_method(self):
        self.service = UserService()

    @pytest.mark.asyncio
    async def test_get_profile_missing(self, mock_db_session):
        with patch("socialnet.services.user_service.UserRepository", return_value=_user_repo()):
            with pytest.raises(NotFoundError):
                await self.service.get_profile(mock_db_session, 99)

    @pytest.mark.asyncio
    async def test_update_profile_applies_only_sent_fields(self, mock_db_session, make_user):
        user = make_user()
        repo = _user_repo(find_by_id=user, update=make_user(age=31))
        with patch("socialnet.services.user_service.UserRepository", return_value=repo):
            result = await self.service.update_profile(mock_db_session, 1, UserUpdate(age=31))

        repo.update.assert_awaited_once_with(user, {"age": 31})
        assert result.age == 31
        assert result.city == "Taipei"

    @pytest.mark.asyncio
    async def test_update_profile_empty_body_changes_nothing(self, mock_db_session, make_user):
        repo = _user_repo(find_by_id=make_user())
        with patch("socialnet.services.user_service.UserRepository", return_value=repo):
            await self.service.update_profile(mock_db_session, 1, UserUpdate())
        repo.update.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_get_user_by_username_hides_email(self, mock_db_session, make_user):
        repo = _user_repo(find_by_username=make_user())
        with patch("socialnet.services.user_service.UserRepository", return_value=repo):
            result = await self.service.get_user_by_username(mock_db_session, "alice")
        assert "email" not in result.model_dump()


class TestVerifyToken:
    def setup_method(self):
        self.service = UserService()

    @pytest.mark.asyncio
    async def test_missing_token(self, mock_db_session):
        with pytest.raises(AuthenticationError):
            await self.service.verify_token(mock_db_session, None)

    @pytest.mark.asyncio
    async def test_invalid_token(self, mock_db_session):
        with pytest.raises(AuthenticationError):
            await self.service.verify_token(mock_db_session, "garbage")

    @pytest.mark.asyncio
    async def test_valid_token_for_deleted_user(self, mock_db_session, make_user):
        token = create_access_token(make_user())
        with patch("socialnet.services.user_service.UserRepository", return_value=_user_repo()):
            with pytest.raises(NotFoundError):
                await self.service.verify_token(mock_db_session, token)

    @pytest.mark.asyncio
    async def test_valid_token(self, mock_db_session, make_user):
        token = create_access_token(make_user())
        repo = _user_repo(find_by_id=make_user())
        with patch("socialnet.services.user_service.UserRepository", return_value=repo):
            payload = await self.service.verify_token(mock_db_session, token)
        assert payload.id == 1
        assert payload.username == "alice"


class TestLikedPosts:
    def setup_method(self):
        self.service = UserService()

    @pytest.mark.asyncio
    async def test_unknown_user(self, mock_db_session):
        with patch("socialnet.services.user_service.UserRepository", return_value=_user_repo()):
            with pytest.raises(NotFoundError):
                await self.service.get_user_liked_posts(mock_db_session, 5)

    @pytest.mark.asyncio
    async def test_limit_is_capped(self, mock_db_session, make_user, make_post):
        post = make_post()
        like = SimpleNamespace(
            id=3, post_id=post.id, user_id=1,
            created_at=post.created_at, updated_at=post.updated_at, post=post,
        )
        like_repo = MagicMock()
        like_repo.find_by_user_id = AsyncMock(return_value=[like])

        with patch("socialnet.services.user_service.UserRepository",
                   return_value=_user_repo(find_by_id=make_user())), \
             patch("socialnet.services.user_service.LikeRepository", return_value=like_repo):
            likes, page = await self.service.get_user_liked_posts(
                mock_db_session, 1, limit=500, offset=-3
            )

        assert (page.limit, page.offset) == (50, 0)
        like_repo.find_by_user_id.assert_awaited_once_with(1, 50, 0)
        assert likes[0].post.content == "hello world"
