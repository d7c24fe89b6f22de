from __future__ import annotations

from dataclasses import dataclass

from .enums import Role


@dataclass(frozen=True)
class Actor:
    """Who is calling a use case (resolved by the surrounding application)."""

    user_id: str
    role: Role
