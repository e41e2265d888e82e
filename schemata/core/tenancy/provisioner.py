# (c) Copyright Datacraft, 2026
"""
Tenant provisioning.

Creates a tenant schema, routes the session into it, loads the initial
schema and seed data and always routes the session back afterwards.
"""
import inspect
import logging
from typing import Sequence

from schemata.core.config import Settings, get_settings

from .context import RoutingContext, SearchPath
from .dependents import SchemaCacheDependent
from .exceptions import (
	NamespaceDropFailed,
	ProvisionerConfigurationError,
	TenantProvisioningFailed,
	TenantRoutingFailed,
	TenantVerificationFailed,
)
from .identifiers import assert_safe
from .loaders import OnLoaded, SchemaLoader, SeedLoader
from .registry import NamespaceRegistry
from .router import SessionRouter

logger = logging.getLogger(__name__)


class TenantProvisioner:
	"""
	Creates and drops tenants.

	A tenant is nothing more than its schema plus whatever the loaders
	put into it.
	"""

	def __init__(
		self,
		schema_loader: SchemaLoader | None,
		seed_loader: SeedLoader | None = None,
		*,
		registry: NamespaceRegistry | None = None,
		router: SessionRouter | None = None,
		shared_schemas: Sequence[str] = ("public", "information_schema"),
		cleanup_on_failure: bool = False,
	):
		if schema_loader is None:
			raise ProvisionerConfigurationError(
				"A schema loader is required to provision tenants"
			)
		self.schema_loader = schema_loader
		self.seed_loader = seed_loader
		self.registry = registry or NamespaceRegistry()
		self.router = router or SessionRouter(self.registry)
		self.shared_schemas = frozenset(shared_schemas)
		self.cleanup_on_failure = cleanup_on_failure

	@classmethod
	def from_settings(
		cls,
		schema_loader: SchemaLoader | None,
		seed_loader: SeedLoader | None = None,
		settings: Settings | None = None,
	) -> "TenantProvisioner":
		settings = settings or get_settings()
		registry = NamespaceRegistry(settings.system_schema_prefix)
		return cls(
			schema_loader,
			seed_loader,
			registry=registry,
			router=SessionRouter(registry, settings.default_search_path),
			shared_schemas=settings.shared_schemas,
			cleanup_on_failure=settings.cleanup_on_failure,
		)

	async def create_tenant(
		self,
		ctx: RoutingContext,
		name: str,
		dependents: Sequence[SchemaCacheDependent] = (),
		on_loaded: OnLoaded | None = None,
	) -> None:
		"""
		Create tenant ``name`` and load its initial schema and data.

		The session is routed back to its previous search path before this
		returns or raises. A schema created before a later step failed is
		not removed unless ``cleanup_on_failure`` is set.
		"""
		assert_safe(name)
		await self.registry.create(ctx, name)

		switches_before = ctx.switches
		try:
			await self.router.switch_and_reset(ctx, [name], dependents)
		except Exception as e:
			# a dependent hook can fail after the switch itself went through
			if ctx.switches != switches_before:
				await self._restore_after_failure(ctx, dependents)
			await self._discard_orphan(ctx, name)
			raise TenantRoutingFailed(name, e) from e

		try:
			await self._verify(ctx, name)
			await self._load(ctx, on_loaded)
		except Exception as e:
			await self._restore_after_failure(ctx, dependents)
			await self._discard_orphan(ctx, name)
			raise TenantProvisioningFailed(name, e) from e

		try:
			await self.router.restore_and_reset(ctx, dependents)
		except Exception as e:
			raise TenantRoutingFailed(name, e) from e
		logger.info(f"Provisioned tenant: {name}")

	async def drop_tenant(self, ctx: RoutingContext, name: str) -> None:
		await self.registry.drop(ctx, name)
		logger.info(f"Dropped tenant: {name}")

	async def list_tenants(self, ctx: RoutingContext) -> list[str]:
		return [
			name for name in await self.registry.list(ctx)
			if name not in self.shared_schemas
		]

	async def _verify(self, ctx: RoutingContext, name: str) -> None:
		# guards against a SET that silently did nothing
		current = await self.router.current(ctx)
		if current.folded() != SearchPath.of(name).folded():
			raise TenantVerificationFailed(
				name, f"search path ({current}) does not equal tenant name ({name})"
			)

	async def _load(self, ctx: RoutingContext, on_loaded: OnLoaded | None) -> None:
		await self.schema_loader(ctx.connection)
		if self.seed_loader is not None:
			await self.seed_loader(ctx.connection)
		if on_loaded is not None:
			result = on_loaded(ctx.connection)
			if inspect.isawaitable(result):
				await result

	async def _restore_after_failure(
		self,
		ctx: RoutingContext,
		dependents: Sequence[SchemaCacheDependent],
	) -> None:
		try:
			await self.router.restore_and_reset(ctx, dependents)
		except Exception:
			logger.exception("Could not restore search path after failed provisioning")

	async def _discard_orphan(self, ctx: RoutingContext, name: str) -> None:
		if not self.cleanup_on_failure:
			logger.warning(f"Schema {name} was left behind by failed provisioning")
			return
		try:
			await self.registry.drop(ctx, name)
		except NamespaceDropFailed:
			logger.exception(f"Could not drop schema {name} after failed provisioning")
