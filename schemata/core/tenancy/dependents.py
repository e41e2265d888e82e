# (c) Copyright Datacraft, 2026
"""
Consumers of cached table metadata.

Column metadata cached under one search path is stale as soon as the path
changes, because the same table name may resolve to a differently shaped
table in another tenant.
"""
from typing import Iterable, Protocol, runtime_checkable

from sqlalchemy import text

from .context import RoutingContext


@runtime_checkable
class SchemaCacheDependent(Protocol):
	def reset_column_information(self) -> None:
		...


def reset_all(dependents: Iterable[SchemaCacheDependent]) -> None:
	for dependent in dependents:
		dependent.reset_column_information()


class ReflectedTable:
	"""
	Column names of the table an unqualified name resolves to.

	The columns are looked up once and cached until
	``reset_column_information`` is called.
	"""

	def __init__(self, name: str):
		self.name = name
		self._columns: list[str] | None = None

	@property
	def is_loaded(self) -> bool:
		return self._columns is not None

	async def columns(self, ctx: RoutingContext) -> list[str]:
		if self._columns is None:
			result = await ctx.connection.execute(
				text(
					"SELECT attname FROM pg_attribute "
					"WHERE attrelid = to_regclass(:table) "
					"AND attnum > 0 AND NOT attisdropped "
					"ORDER BY attnum"
				),
				{"table": self.name},
			)
			self._columns = list(result.scalars().all())
		return self._columns

	def reset_column_information(self) -> None:
		self._columns = None

	def __repr__(self) -> str:
		return f"ReflectedTable({self.name!r})"
