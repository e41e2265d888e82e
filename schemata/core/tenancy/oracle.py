# (c) Copyright Datacraft, 2026
"""
Table existence checks that honor the active search path.

Two tenants legitimately own identically named tables in different
schemas, so "does the table exist" has to mean "does it exist for the
schemas this session currently sees".
"""
import logging

from sqlalchemy import text

from .context import RoutingContext

logger = logging.getLogger(__name__)


def split_table_name(name: str) -> tuple[str | None, str]:
	"""
	Split ``schema.table`` into its parts.

	Quoted input is taken as a literal table name without a schema.
	"""
	schema, sep, table = name.partition(".")
	if not sep:
		schema, table = None, schema
	if name.startswith('"'):
		schema, table = None, name
	return schema, table.strip('"')


async def table_exists(ctx: RoutingContext, name: str) -> bool:
	schema, table = split_table_name(str(name))
	sql = "SELECT COUNT(*) FROM pg_tables WHERE tablename = :table"
	params = {"table": table}
	if schema is not None:
		sql += " AND schemaname = :schema"
		params["schema"] = schema
	else:
		sql += " AND schemaname = ANY (current_schemas(false))"

	result = await ctx.connection.execute(text(sql), params)
	found = int(result.scalar() or 0) > 0
	logger.debug(f"Table {name} exists: {found}")
	return found
