# (c) Copyright Datacraft, 2026
"""Exceptions raised by schema-per-tenant routing and provisioning."""
from typing import Sequence


class SchemataError(Exception):
	"""Base class for all tenancy errors."""


class InjectionRisk(SchemataError, ValueError):
	"""Raised when a namespace name is not safe to interpolate into SQL."""

	def __init__(self, name: object):
		self.name = name
		super().__init__(f"Schema name {name!r} is subject to injection attack")


class NamespaceError(SchemataError):
	"""DDL against a namespace failed."""

	action = "process"

	def __init__(
		self,
		name: str,
		cause: BaseException | None = None,
		search_path: Sequence[str] | None = None,
	):
		self.name = name
		self.cause = cause
		self.search_path = search_path
		message = f"Could not {self.action} schema {name}"
		if cause is not None:
			message = f"{message}: {cause}"
		if search_path is not None:
			message = f"{message} (search_path: {', '.join(search_path)})"
		super().__init__(message)


class NamespaceCreateFailed(NamespaceError):
	action = "create"


class NamespaceDropFailed(NamespaceError):
	action = "drop"


class InvalidPath(SchemataError):
	"""Setting the session search path failed."""

	def __init__(self, path: Sequence[str] | None, cause: BaseException | str | None = None):
		self.path = path
		self.cause = cause
		rendered = ", ".join(path) if path is not None else "<none>"
		message = f"Could not set search path to {rendered}"
		if cause is not None:
			message = f"{message}: {cause}"
		super().__init__(message)


class NoPriorPath(InvalidPath):
	"""Restore was requested but no prior search path was recorded."""

	def __init__(self):
		super().__init__(None, "no prior search path to restore")


class TenantError(SchemataError):
	"""Base class for tenant provisioning errors."""

	def __init__(self, tenant: str, cause: BaseException | str | None = None):
		self.tenant = tenant
		self.cause = cause
		message = f"{self.__class__.__name__} for tenant {tenant}"
		if cause is not None:
			message = f"{message}: {cause}"
		super().__init__(message)


class TenantRoutingFailed(TenantError):
	"""The session could not be routed into a freshly created tenant schema."""


class TenantVerificationFailed(TenantError):
	"""The search path after routing does not point at the tenant."""


class TenantProvisioningFailed(TenantError):
	"""Loading schema or seed data into the tenant failed."""


class ProvisionerConfigurationError(SchemataError):
	"""The provisioner is missing a required collaborator."""
