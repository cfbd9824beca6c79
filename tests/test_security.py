import pytest

from src.core.entities.user import Role, User
from src.core.exceptions import AuthenticationError
from src.infrastructure.security.jwt_service import JwtService
from src.infrastructure.security.password_hasher import PasswordHasher

SECRET = "unit-test-secret-with-enough-length-0123"


def test_password_hash_round_trip():
    hasher = PasswordHasher(iterations=1000)
    encoded = hasher.hash("secret123")
    assert encoded.startswith("pbkdf2_sha256$1000$")
    assert hasher.verify("secret123", encoded)
    assert not hasher.verify("secret124", encoded)


def test_password_hash_is_salted():
    hasher = PasswordHasher(iterations=1000)
    assert hasher.hash("same") != hasher.hash("same")


def test_password_verify_rejects_malformed_hash():
    assert PasswordHasher(iterations=1000).verify("x", "not-a-hash") is False


@pytest.mark.parametrize("encoded", [
    "pbkdf2_sha256$many$c2FsdA==$a2V5",
    "pbkdf2_sha256$1000$!!not base64!!$a2V5",
    "pbkdf2_sha256$1000$c2FsdA==$a2V5=",
    "pbkdf2_sha256$0$c2FsdA==$a2V5",
    "md5$1000$c2FsdA==$a2V5",
])
def test_password_verify_rejects_corrupt_fields(encoded):
    assert PasswordHasher(iterations=1000).verify("secret", encoded) is False


def test_jwt_round_trip():
    service = JwtService(SECRET, expiration_seconds=60)
    user = User(id=7, username="alice", email="a@example.com", roles={Role.USER, Role.ADMIN})
    claims = service.validate_token(service.generate_token(user))
    assert claims.username == "alice"
    assert claims.user_id == 7
    assert claims.roles == ("ROLE_ADMIN", "ROLE_USER")


def test_jwt_expired():
    service = JwtService(SECRET, expiration_seconds=-10)
    token = service.generate_token(User(id=1, username="bob", email="b@example.com"))
    with pytest.raises(AuthenticationError) as exc:
        service.validate_token(token)
    assert "expired" in exc.value.message


def test_jwt_wrong_secret():
    token = JwtService(SECRET).generate_token(User(id=1, username="bob", email="b@example.com"))
    with pytest.raises(AuthenticationError):
        JwtService(SECRET + "x").validate_token(token)
