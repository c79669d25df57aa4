"""Remark domain model."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Remark:
    """A titled service note attached to a schedule entry."""

    title: str
    message: str
