"""Configuration helpers for sw_common."""

from .env import env_flag, env_name, env_value, parse_bool_env, parse_int_env

__all__ = [
    "env_flag",
    "env_name",
    "env_value",
    "parse_bool_env",
    "parse_int_env",
]
