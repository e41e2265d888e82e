# (c) Copyright Datacraft, 2026
"""
Validation of schema identifiers.

Schema names cannot be bound as query parameters, so every name that is
interpolated into DDL or SET statements has to pass through here first.
"""
import re
from typing import Iterable

from .exceptions import InjectionRisk

USER_PLACEHOLDER = "$user"

_SAFE_NAME = re.compile(r"[A-Za-z][A-Za-z0-9]*")


def is_safe(name: object) -> bool:
	"""Check whether ``name`` may be used literally in SQL."""
	if not isinstance(name, str):
		return False
	return name == USER_PLACEHOLDER or _SAFE_NAME.fullmatch(name) is not None


def assert_safe(name: object) -> None:
	if not is_safe(name):
		raise InjectionRisk(name)


def assert_safe_path(path: Iterable[str]) -> None:
	"""Validate every element of a search path."""
	for name in path:
		assert_safe(name)
