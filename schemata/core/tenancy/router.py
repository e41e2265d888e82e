# (c) Copyright Datacraft, 2026
"""
Search path routing for a single database session.

Every switch records the active path in the routing context so it can be
restored, and a switch that fails is rolled back before the error is
raised.
"""
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Iterable, Sequence

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from .context import RoutingContext, SearchPath, show_raw_search_path, show_search_path
from .dependents import SchemaCacheDependent, reset_all
from .exceptions import InvalidPath, NoPriorPath, SchemataError
from .identifiers import USER_PLACEHOLDER, assert_safe_path
from .registry import NamespaceRegistry

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_PATH = SearchPath((USER_PLACEHOLDER, "public"))

PathLike = SearchPath | str | Iterable[str]


class SessionRouter:
	"""Reads and changes the search path of a routing context's connection."""

	def __init__(
		self,
		registry: NamespaceRegistry | None = None,
		default_search_path: PathLike = DEFAULT_SEARCH_PATH,
	):
		self.registry = registry or NamespaceRegistry()
		self.default_search_path = SearchPath.of(default_search_path)

	async def current(self, ctx: RoutingContext) -> SearchPath:
		return await show_search_path(ctx.connection)

	async def current_namespace(self, ctx: RoutingContext) -> str | None:
		"""Schema that unqualified names resolve against first."""
		result = await ctx.connection.execute(text("SELECT current_schema()"))
		return result.scalar()

	async def switch(self, ctx: RoutingContext, path: PathLike) -> None:
		path = self._validated(path)
		try:
			prior = await show_raw_search_path(ctx.connection)
		except SQLAlchemyError as e:
			raise InvalidPath(path, e) from e
		ctx.remember(prior)
		try:
			await self._apply(ctx, path)
		except InvalidPath:
			await self._rollback_switch(ctx)
			raise
		except SQLAlchemyError as e:
			await self._rollback_switch(ctx)
			raise InvalidPath(path, e) from e
		ctx.switches += 1

	async def restore(self, ctx: RoutingContext) -> None:
		"""
		Return to the path that was active before the last switch.

		The recorded text is passed back as a bound value, so paths set by
		the server or a role default are restored as they were, quoting
		included.
		"""
		if not ctx.history:
			raise NoPriorPath()
		prior = ctx.history[-1]
		logger.info(f"--Restoring search path to: {prior}")
		try:
			await ctx.connection.execute(
				text("SELECT set_config('search_path', :path, false)"),
				{"path": prior},
			)
		except SQLAlchemyError as e:
			raise InvalidPath(SearchPath.parse(prior), e) from e
		ctx.forget()

	async def default_path(self, ctx: RoutingContext) -> None:
		await self.switch(ctx, self.default_search_path)

	async def switch_and_reset(
		self,
		ctx: RoutingContext,
		path: PathLike,
		dependents: Sequence[SchemaCacheDependent] = (),
	) -> None:
		"""
		Switch, then invalidate cached table metadata of ``dependents``.

		Metadata is invalidated whether or not the switch succeeded.
		"""
		path = self._validated(path)
		try:
			await self.switch(ctx, path)
		finally:
			reset_all(dependents)

	async def restore_and_reset(
		self,
		ctx: RoutingContext,
		dependents: Sequence[SchemaCacheDependent] = (),
	) -> None:
		try:
			await self.restore(ctx)
		finally:
			reset_all(dependents)

	async def default_path_and_reset(
		self,
		ctx: RoutingContext,
		dependents: Sequence[SchemaCacheDependent] = (),
	) -> None:
		await self.switch_and_reset(ctx, self.default_search_path, dependents)

	@asynccontextmanager
	async def routed(
		self,
		ctx: RoutingContext,
		path: PathLike,
		dependents: Sequence[SchemaCacheDependent] = (),
	) -> AsyncIterator[RoutingContext]:
		"""
		Route the session to ``path`` for the duration of the block.

		Example:
			async with router.routed(ctx, "acme", [Item]):
				await ctx.connection.execute(select(Item.table))
		"""
		await self.switch_and_reset(ctx, path, dependents)
		try:
			yield ctx
		finally:
			await self.restore_and_reset(ctx, dependents)

	def _validated(self, path: PathLike) -> SearchPath:
		path = SearchPath.of(path)
		if not path:
			raise InvalidPath(path, "search path is empty")
		assert_safe_path(path)
		return path

	async def _apply(self, ctx: RoutingContext, path: SearchPath) -> None:
		# PostgreSQL accepts schemas that do not exist in search_path
		for name in path:
			if name != USER_PLACEHOLDER and not await self.registry.exists(ctx, name):
				raise InvalidPath(path, f"schema {name} does not exist")
		logger.info(f"--Setting search path to: {path}")
		await ctx.connection.execute(text(f"SET search_path TO {path.to_sql()}"))

	async def _rollback_switch(self, ctx: RoutingContext) -> None:
		try:
			await self.restore(ctx)
		except (SchemataError, SQLAlchemyError):
			logger.exception("Could not restore search path after a failed switch")
