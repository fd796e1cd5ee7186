"""Gymnasium environments for Rustris."""

from __future__ import annotations

from gymnasium.envs.registration import register

from .rustris_env import RustrisEnv

register(
    id="Rustris-v0",
    entry_point="rustris.env.rustris_env:RustrisEnv",
)

__all__ = ["RustrisEnv"]
