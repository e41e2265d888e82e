# (c) Copyright Datacraft, 2026
"""
Loaders that populate a freshly routed tenant schema.

A loader is any async callable taking the routed connection. Tables must
be created without an explicit schema so they land in the schema the
session is routed to.
"""
import logging
from typing import Awaitable, Callable, Sequence

from sqlalchemy import MetaData, text
from sqlalchemy.ext.asyncio import AsyncConnection

logger = logging.getLogger(__name__)

SchemaLoader = Callable[[AsyncConnection], Awaitable[None]]
SeedLoader = Callable[[AsyncConnection], Awaitable[None]]
OnLoaded = Callable[[AsyncConnection], Awaitable[None] | None]


class MetadataSchemaLoader:
	"""Create every table of a SQLAlchemy ``MetaData`` in the active schema."""

	def __init__(self, metadata: MetaData):
		qualified = [
			table.name for table in metadata.tables.values()
			if table.schema is not None
		]
		if qualified:
			raise ValueError(
				f"Tables bound to a fixed schema cannot be loaded per tenant: {qualified}"
			)
		self.metadata = metadata

	async def __call__(self, conn: AsyncConnection) -> None:
		await conn.run_sync(self.metadata.create_all)
		logger.info(f"Applied metadata with {len(self.metadata.tables)} tables")


class StatementLoader:
	"""Execute SQL statements in order, e.g. seed inserts."""

	def __init__(self, statements: Sequence[str]):
		self.statements = list(statements)

	async def __call__(self, conn: AsyncConnection) -> None:
		for statement in self.statements:
			await conn.execute(text(statement))
		logger.debug(f"Executed {len(self.statements)} statements")
