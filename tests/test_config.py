"""
Configuration validation tests.
"""

import pytest
from pydantic import ValidationError

from authgate.config import DEV_JWT_SECRET, Environment, Settings, StateBackend


def make_settings(**overrides) -> Settings:
    return Settings(_env_file=None, **overrides)


def test_defaults():
    config = make_settings(env=Environment.DEVELOPMENT, state_backend=StateBackend.MEMORY)

    assert config.state_root == "/authgate"
    assert config.jwt_algorithm == "HS256"
    assert config.token_ttl_seconds == 3600
    assert config.reject_inactive_tokens is False


def test_redis_backend_requires_url():
    with pytest.raises(ValidationError):
        make_settings(state_backend=StateBackend.REDIS, redis_url=None)


def test_redis_url_scheme_is_checked():
    with pytest.raises(ValidationError):
        make_settings(state_backend=StateBackend.REDIS, redis_url="http://localhost:6379")

    config = make_settings(state_backend=StateBackend.REDIS, redis_url="rediss://cache:6380/0")
    assert config.redis_url == "rediss://cache:6380/0"


@pytest.mark.parametrize("env", [Environment.STAGING, Environment.PRODUCTION])
def test_dev_secret_rejected_outside_development(env):
    with pytest.raises(ValidationError):
        make_settings(env=env, jwt_secret=DEV_JWT_SECRET)

    assert make_settings(env=env, jwt_secret="a-real-secret").env == env


@pytest.mark.parametrize("root,expected", [("authgate", "/authgate"), ("/proxy/auth/", "/proxy/auth")])
def test_state_root_is_normalized(root, expected):
    assert make_settings(state_root=root).state_root == expected


def test_empty_state_root_rejected():
    with pytest.raises(ValidationError):
        make_settings(state_root="/")


@pytest.mark.parametrize("rounds", [3, 32])
def test_bcrypt_rounds_range(rounds):
    with pytest.raises(ValidationError):
        make_settings(bcrypt_rounds=rounds)


def test_port_range():
    with pytest.raises(ValidationError):
        make_settings(port=70000)
