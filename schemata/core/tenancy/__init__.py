# (c) Copyright Datacraft, 2026
"""
Multi-tenancy with schema-per-tenant isolation.

Provides schema lifecycle management, search path routing and tenant
provisioning on top of a SQLAlchemy async connection.
"""
from .context import (
	RoutingContext,
	SearchPath,
	get_routing_context,
	require_routing_context,
	use_routing_context,
)
from .dependents import ReflectedTable, SchemaCacheDependent
from .exceptions import (
	InjectionRisk,
	InvalidPath,
	NamespaceCreateFailed,
	NamespaceDropFailed,
	NoPriorPath,
	ProvisionerConfigurationError,
	SchemataError,
	TenantProvisioningFailed,
	TenantRoutingFailed,
	TenantVerificationFailed,
)
from .identifiers import assert_safe, is_safe
from .loaders import MetadataSchemaLoader, StatementLoader
from .oracle import table_exists
from .provisioner import TenantProvisioner
from .registry import NamespaceRegistry
from .router import SessionRouter

__all__ = [
	'RoutingContext',
	'SearchPath',
	'get_routing_context',
	'require_routing_context',
	'use_routing_context',
	'ReflectedTable',
	'SchemaCacheDependent',
	'InjectionRisk',
	'InvalidPath',
	'NamespaceCreateFailed',
	'NamespaceDropFailed',
	'NoPriorPath',
	'ProvisionerConfigurationError',
	'SchemataError',
	'TenantProvisioningFailed',
	'TenantRoutingFailed',
	'TenantVerificationFailed',
	'assert_safe',
	'is_safe',
	'MetadataSchemaLoader',
	'StatementLoader',
	'table_exists',
	'TenantProvisioner',
	'NamespaceRegistry',
	'SessionRouter',
]
