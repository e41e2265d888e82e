# (c) Copyright Datacraft, 2026
"""Pytest fixtures with an in-memory stand-in for a PostgreSQL session."""
import re

import pytest
from sqlalchemy.exc import ProgrammingError

from schemata.core.tenancy import NamespaceRegistry, RoutingContext, SearchPath, SessionRouter

_CREATE_TABLE = re.compile(r"CREATE TABLE (?P<name>[\w.\"]+)\s*\((?P<columns>.*)\)", re.S)


class FakeResult:
	def __init__(self, value=None, rows=()):
		self._value = value
		self._rows = list(rows)

	def scalar(self):
		return self._value

	def scalars(self):
		return self

	def all(self):
		return list(self._rows)


class FakeDatabase:
	"""Schemas and tables of one database: schema -> table -> columns."""

	def __init__(self, user: str = "app"):
		self.user = user
		self.schemas: dict[str, dict[str, list[str]]] = {
			"public": {},
			"information_schema": {},
			"pg_catalog": {},
			"pg_toast": {},
		}

	def add_schema(self, name: str) -> None:
		self.schemas.setdefault(name.lower(), {})

	def add_table(self, schema: str, table: str, columns: list[str]) -> None:
		self.schemas[schema.lower()][table] = list(columns)


class FakeConnection:
	"""
	Interprets the statements issued by schemata.

	``fail_on`` maps a SQL fragment to the error raised when a statement
	contains it. With ``ignore_set`` the session silently keeps its path.
	"""

	def __init__(self, database: FakeDatabase):
		self.database = database
		self.raw_search_path = '"$user", public'
		self.statements: list[str] = []
		self.fail_on: dict[str, Exception] = {}
		self.ignore_set = False

	def current_schemas(self) -> list[str]:
		names = []
		for name in SearchPath.parse(self.raw_search_path):
			if name == "$user":
				name = self.database.user
			name = name.lower()
			if name in self.database.schemas:
				names.append(name)
		return names

	def resolve(self, table: str) -> str | None:
		for schema in self.current_schemas():
			if table in self.database.schemas[schema]:
				return schema
		return None

	async def execute(self, statement, params=None):
		sql = str(statement).strip()
		params = params or {}
		self.statements.append(sql)
		for fragment, error in self.fail_on.items():
			if fragment in sql:
				raise error

		schemas = self.database.schemas
		if sql.startswith("CREATE SCHEMA "):
			name = sql.split()[2].lower()
			if name in schemas:
				raise _error(sql, f'schema "{name}" already exists')
			schemas[name] = {}
			return FakeResult()

		if sql.startswith("DROP SCHEMA "):
			name = sql.split()[2].lower()
			if name not in schemas:
				raise _error(sql, f'schema "{name}" does not exist')
			del schemas[name]
			return FakeResult()

		if sql.startswith("SELECT nspname FROM pg_namespace"):
			return FakeResult(rows=sorted(
				name for name in schemas if not name.startswith(params["prefix"])
			))

		if sql.startswith("SELECT EXISTS(SELECT 1 FROM pg_namespace"):
			return FakeResult(params["name"].lower() in schemas)

		if sql == "SHOW search_path":
			return FakeResult(self.raw_search_path)

		if sql == "SELECT current_schema()":
			current = self.current_schemas()
			return FakeResult(current[0] if current else None)

		if sql.startswith("SELECT set_config('search_path'"):
			if not self.ignore_set:
				self.raw_search_path = params["path"]
			return FakeResult(params["path"])

		if sql.startswith("SET search_path TO "):
			if not self.ignore_set:
				self.raw_search_path = sql[len("SET search_path TO "):]
			return FakeResult()

		if sql.startswith("SELECT COUNT(*) FROM pg_tables"):
			if "schemaname = :schema" in sql:
				candidates = [params["schema"]]
			else:
				candidates = self.current_schemas()
			count = sum(
				1 for schema in candidates
				if params["table"] in schemas.get(schema, {})
			)
			return FakeResult(count)

		if sql.startswith("SELECT attname FROM pg_attribute"):
			schema = self.resolve(params["table"])
			if schema is None:
				return FakeResult(rows=[])
			return FakeResult(rows=schemas[schema][params["table"]])

		match = _CREATE_TABLE.match(sql)
		if match:
			name = match.group("name")
			if "." in name:
				schema, name = name.split(".", 1)
			else:
				current = self.current_schemas()
				if not current:
					raise _error(sql, "no schema has been selected to create in")
				schema = current[0]
			columns = [part.split()[0] for part in match.group("columns").split(",")]
			schemas[schema][name] = columns
			return FakeResult()

		if sql.startswith("INSERT INTO "):
			return FakeResult()

		raise AssertionError(f"Unexpected statement: {sql}")


def _error(sql: str, message: str) -> ProgrammingError:
	return ProgrammingError(sql, {}, Exception(message))


@pytest.fixture
def database():
	return FakeDatabase()


@pytest.fixture
def connection(database):
	return FakeConnection(database)


@pytest.fixture
def ctx(connection):
	return RoutingContext(connection)


@pytest.fixture
def registry():
	return NamespaceRegistry()


@pytest.fixture
def router(registry):
	return SessionRouter(registry)
