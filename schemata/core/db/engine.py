# (c) Copyright Datacraft, 2026
"""Engine creation and routing connection checkout."""
import logging
import ssl
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import NullPool

from schemata.core.config import get_settings
from schemata.core.tenancy.context import RoutingContext, use_routing_context

logger = logging.getLogger(__name__)

_engine: AsyncEngine | None = None


def create_engine_from_settings() -> AsyncEngine:
	settings = get_settings()
	if settings.async_db_url is None:
		raise RuntimeError("SCHEMATA_DB_URL is not configured")

	connect_args = {}
	if settings.db_ssl:
		# asyncpg requires an SSL context, not sslmode
		ssl_context = ssl.create_default_context()
		ssl_context.check_hostname = False
		ssl_context.verify_mode = ssl.CERT_NONE
		connect_args["ssl"] = ssl_context

	return create_async_engine(
		settings.async_db_url,
		poolclass=NullPool,
		echo=settings.db_echo,
		connect_args=connect_args,
	)


def get_engine() -> AsyncEngine:
	global _engine
	if _engine is None:
		_engine = create_engine_from_settings()
	return _engine


@asynccontextmanager
async def routing_connection(
	engine: AsyncEngine | None = None,
	history_depth: int | None = None,
) -> AsyncIterator[RoutingContext]:
	"""
	Check out one connection and bind a fresh routing context to it.

	Statements run in autocommit mode; schema DDL and search path changes
	are not wrapped in a transaction.

	Example:
		async with routing_connection() as ctx:
			await provisioner.create_tenant(ctx, "acme")
	"""
	engine = engine or get_engine()
	if history_depth is None:
		history_depth = get_settings().history_depth

	autocommit = engine.execution_options(isolation_level="AUTOCOMMIT")
	async with autocommit.connect() as conn:
		ctx = RoutingContext(conn, history_depth=history_depth)
		async with use_routing_context(ctx):
			yield ctx
