"""Orchestrator module for starter-kit generation."""

from .result_cache import ResultCache, make_cache_key
from .limiter import ConcurrencyLimiter
from .generation_orchestrator import GenerationOrchestrator, extract_delimited
from .kit_manager import KitManager, KitResult, archive_filename

__all__ = [
    "ResultCache",
    "make_cache_key",
    "ConcurrencyLimiter",
    "GenerationOrchestrator",
    "extract_delimited",
    "KitManager",
    "KitResult",
    "archive_filename",
]
