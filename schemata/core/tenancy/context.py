# (c) Copyright Datacraft, 2026
"""
Routing context management.

A ``RoutingContext`` ties search path history to exactly one checked-out
connection, so concurrent units of work never share routing state.
"""
import contextvars
import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Iterable

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncConnection

from .exceptions import NoPriorPath
from .identifiers import USER_PLACEHOLDER

logger = logging.getLogger(__name__)

# Context variable for the routing context of the current unit of work
_routing_context: contextvars.ContextVar["RoutingContext | None"] = contextvars.ContextVar(
	"routing_context", default=None
)


class SearchPath(tuple):
	"""Ordered, immutable list of schema names consulted by a session."""

	@classmethod
	def parse(cls, raw: str | None) -> "SearchPath":
		"""Parse the text returned by ``SHOW search_path``."""
		if not raw:
			return cls()
		names = (part.strip().strip('"') for part in raw.split(","))
		return cls(name for name in names if name)

	@classmethod
	def of(cls, value: "SearchPath | str | Iterable[str]") -> "SearchPath":
		if isinstance(value, SearchPath):
			return value
		if isinstance(value, str):
			return cls((value,))
		return cls(value)

	def to_sql(self) -> str:
		"""Render the operand of ``SET search_path TO``."""
		if not self:
			return "''"
		return ", ".join(
			f'"{name}"' if name == USER_PLACEHOLDER else name
			for name in self
		)

	def folded(self) -> "SearchPath":
		"""Names as PostgreSQL stores unquoted identifiers."""
		return SearchPath(
			name if name == USER_PLACEHOLDER else name.lower()
			for name in self
		)

	def __str__(self) -> str:
		return self.to_sql()


async def show_raw_search_path(connection: AsyncConnection) -> str:
	"""The search path exactly as the server reports it, quoting included."""
	result = await connection.execute(text("SHOW search_path"))
	return result.scalar() or ""


async def show_search_path(connection: AsyncConnection) -> SearchPath:
	return SearchPath.parse(await show_raw_search_path(connection))


@dataclass(slots=True)
class RoutingContext:
	"""
	Routing state of one connection for one unit of work.

	Prior paths are kept as the raw text reported by the server so they
	can be restored verbatim, whatever the names in them look like.

	``history_depth`` bounds how many prior search paths are remembered.
	With the default depth of 1 a second switch before a restore discards
	the path that was active before the first switch.
	"""
	connection: AsyncConnection
	history_depth: int = 1
	history: deque[str] = field(default_factory=deque)
	# completed switches
	switches: int = 0

	def __post_init__(self) -> None:
		if self.history_depth < 1:
			raise ValueError("history_depth must be at least 1")

	@property
	def prior_path(self) -> SearchPath | None:
		"""The path a restore would return to."""
		return SearchPath.parse(self.history[-1]) if self.history else None

	def remember(self, raw_path: str) -> None:
		self.history.append(raw_path)
		while len(self.history) > self.history_depth:
			lost = self.history.popleft()
			logger.warning(
				f"Search path history exceeded depth {self.history_depth}, "
				f"discarding prior path: {lost}"
			)

	def forget(self) -> str:
		"""Drop and return the most recent prior path."""
		if not self.history:
			raise NoPriorPath()
		return self.history.pop()


def get_routing_context() -> RoutingContext | None:
	"""
	Get the routing context published for the current unit of work.

	Returns None outside of ``use_routing_context``.
	"""
	return _routing_context.get()


def set_routing_context(context: RoutingContext | None) -> contextvars.Token:
	return _routing_context.set(context)


def require_routing_context() -> RoutingContext:
	ctx = get_routing_context()
	if ctx is None:
		raise RuntimeError("No routing context available - check out a connection first")
	return ctx


class use_routing_context:
	"""
	Publish a routing context to code running in the current async chain.

	Example:
		async with use_routing_context(ctx):
			await load_reports()
	"""

	def __init__(self, context: RoutingContext):
		self.context = context
		self.token: contextvars.Token | None = None

	def __enter__(self) -> RoutingContext:
		self.token = set_routing_context(self.context)
		return self.context

	def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
		if self.token is not None:
			_routing_context.reset(self.token)
			self.token = None

	async def __aenter__(self) -> RoutingContext:
		return self.__enter__()

	async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
		self.__exit__(exc_type, exc_val, exc_tb)
