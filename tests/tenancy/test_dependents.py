# (c) Copyright Datacraft, 2026
"""Tests for cached table metadata and its invalidation."""
import pytest

from schemata.core.tenancy import ReflectedTable, SchemaCacheDependent
from schemata.core.tenancy.dependents import reset_all


def test_reflected_table_is_a_dependent():
	assert isinstance(ReflectedTable("items"), SchemaCacheDependent)


@pytest.mark.asyncio
async def test_columns_are_cached_until_reset(ctx, router, database, connection):
	database.add_schema("acme")
	database.add_schema("globex")
	database.add_table("acme", "items", ["id", "name"])
	database.add_table("globex", "items", ["id", "sku", "price"])
	items = ReflectedTable("items")

	await router.switch(ctx, "acme")
	assert await items.columns(ctx) == ["id", "name"]
	await router.restore(ctx)

	# a plain switch leaves the stale cache in place
	await router.switch(ctx, "globex")
	assert await items.columns(ctx) == ["id", "name"]
	await router.restore(ctx)

	await router.switch_and_reset(ctx, "globex", [items])
	assert not items.is_loaded
	assert await items.columns(ctx) == ["id", "sku", "price"]


@pytest.mark.asyncio
async def test_missing_table_has_no_columns(ctx):
	assert await ReflectedTable("nothing").columns(ctx) == []


def test_reset_all():
	first, second = ReflectedTable("a"), ReflectedTable("b")
	first._columns = ["id"]
	second._columns = ["id"]

	reset_all([first, second])

	assert not first.is_loaded
	assert not second.is_loaded
