# (c) Copyright Datacraft, 2026
"""
Creation, destruction and enumeration of PostgreSQL schemas.

Each tenant lives in its own schema, so dropping a schema removes every
table and row that belonged to the tenant.
"""
import logging

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from .context import RoutingContext, SearchPath, show_search_path
from .exceptions import NamespaceCreateFailed, NamespaceDropFailed
from .identifiers import assert_safe

logger = logging.getLogger(__name__)

SYSTEM_SCHEMA_PREFIX = "pg_"


class NamespaceRegistry:
	"""Issues schema DDL on the connection of a routing context."""

	def __init__(self, system_prefix: str = SYSTEM_SCHEMA_PREFIX):
		self.system_prefix = system_prefix

	async def create(self, ctx: RoutingContext, name: str) -> None:
		"""
		Create schema ``name``.

		A failed CREATE is not cleaned up; a partially created schema is
		left for the operator.
		"""
		assert_safe(name)
		try:
			await ctx.connection.execute(text(f"CREATE SCHEMA {name}"))
		except SQLAlchemyError as e:
			search_path = await self._diagnostic_search_path(ctx)
			raise NamespaceCreateFailed(name, e, search_path) from e
		logger.info(f"Created schema: {name}")

	async def drop(self, ctx: RoutingContext, name: str) -> None:
		"""
		Drop schema ``name`` and everything in it.

		There is no confirmation step; the data is gone once this returns.
		"""
		assert_safe(name)
		try:
			await ctx.connection.execute(text(f"DROP SCHEMA {name} CASCADE"))
		except SQLAlchemyError as e:
			search_path = await self._diagnostic_search_path(ctx)
			raise NamespaceDropFailed(name, e, search_path) from e
		logger.info(f"Dropped schema: {name}")

	async def list(self, ctx: RoutingContext) -> list[str]:
		"""List schemas that are not reserved by PostgreSQL itself."""
		result = await ctx.connection.execute(
			text(
				"SELECT nspname FROM pg_namespace "
				"WHERE NOT starts_with(nspname, :prefix) "
				"ORDER BY nspname"
			),
			{"prefix": self.system_prefix},
		)
		return list(result.scalars().all())

	async def exists(self, ctx: RoutingContext, name: str) -> bool:
		result = await ctx.connection.execute(
			text(
				"SELECT EXISTS(SELECT 1 FROM pg_namespace "
				"WHERE nspname = lower(:name))"
			),
			{"name": name},
		)
		return bool(result.scalar())

	async def _diagnostic_search_path(self, ctx: RoutingContext) -> SearchPath | None:
		try:
			return await show_search_path(ctx.connection)
		except SQLAlchemyError as e:
			logger.warning(f"Could not read search path for diagnostics: {e}")
			return None
