# (c) Copyright Datacraft, 2026
"""Tests for tenant schema and seed loaders."""
from unittest.mock import AsyncMock

import pytest
from sqlalchemy import Column, Integer, MetaData, String, Table

from schemata.core.tenancy import MetadataSchemaLoader, StatementLoader


def _metadata(schema=None):
	metadata = MetaData()
	Table(
		"widgets",
		metadata,
		Column("id", Integer, primary_key=True),
		Column("name", String(100)),
		schema=schema,
	)
	return metadata


@pytest.mark.asyncio
async def test_metadata_loader_runs_create_all():
	metadata = _metadata()
	conn = AsyncMock()

	await MetadataSchemaLoader(metadata)(conn)

	conn.run_sync.assert_awaited_once_with(metadata.create_all)


def test_metadata_loader_rejects_schema_bound_tables():
	with pytest.raises(ValueError, match="widgets"):
		MetadataSchemaLoader(_metadata(schema="public"))


@pytest.mark.asyncio
async def test_statement_loader_runs_in_order(ctx, router, database, connection):
	database.add_schema("acme")
	loader = StatementLoader([
		"CREATE TABLE widgets (id integer, name text)",
		"INSERT INTO widgets (id, name) VALUES (1, 'sprocket')",
	])

	await router.switch(ctx, "acme")
	await loader(connection)

	assert database.schemas["acme"]["widgets"] == ["id", "name"]
	assert connection.statements[-1].startswith("INSERT INTO widgets")
