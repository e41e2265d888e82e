# (c) Copyright Datacraft, 2026
from .engine import get_engine, routing_connection

__all__ = [
	'get_engine',
	'routing_connection',
]
