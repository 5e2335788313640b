"""Enum used by accessor tests."""

from enum import Enum


class Level(Enum):
    DEBUG = 10
    INFO = 20
    WARNING = 30
