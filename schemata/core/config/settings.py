# (c) Copyright Datacraft, 2026
"""Application settings configuration."""
from pathlib import Path

from pydantic import PostgresDsn, Field, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
	db_url: PostgresDsn | None = None
	db_ssl: bool = False
	db_echo: bool = False
	log_config: Path | None = None

	# Search path routing
	default_search_path: list[str] = Field(default_factory=lambda: ["$user", "public"])
	history_depth: int = Field(ge=1, default=1)

	# Schemas that are never reported as tenants
	system_schema_prefix: str = 'pg_'
	shared_schemas: list[str] = Field(
		default_factory=lambda: ["public", "information_schema"]
	)

	# Drop the schema of a tenant whose provisioning failed
	cleanup_on_failure: bool = False

	@field_validator('default_search_path')
	@classmethod
	def validate_search_path(cls, value: list[str]) -> list[str]:
		from schemata.core.tenancy.identifiers import assert_safe

		if not value:
			raise ValueError("default_search_path must not be empty")
		for name in value:
			assert_safe(name)
		return value

	@computed_field
	@property
	def async_db_url(self) -> str | None:
		if self.db_url is None:
			return None
		url = str(self.db_url)
		# Handle various PostgreSQL URL formats
		if "postgresql+psycopg://" in url:
			return url.replace("postgresql+psycopg://", "postgresql+asyncpg://", 1)
		elif "postgresql://" in url:
			return url.replace("postgresql://", "postgresql+asyncpg://", 1)
		return url

	model_config = SettingsConfigDict(
		env_prefix='schemata_',
		env_file='.env',
		env_file_encoding='utf-8',
		extra='ignore',
	)


_settings: Settings | None = None


def get_settings() -> Settings:
	global _settings
	if _settings is None:
		_settings = Settings()
	return _settings
