"""Kit Manager - entry point that turns a request into a starter-kit archive.

The Kit Manager:
1. Configures the selected provider (missing credential aborts the request)
2. Runs the Generation Orchestrator
3. Assembles the collected files into a ZIP archive
"""

import base64
import json
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from archive import assemble
from contracts import FileData, GenerationRequest, TaskStatus
from prompts import TemplateResolver
from providers import LiteLLMGateway, ModelGateway
from .generation_orchestrator import GenerationOrchestrator
from .result_cache import ResultCache


@dataclass
class KitResult:
    """A finished kit: per-task status plus the archive bytes."""
    results: Dict[str, TaskStatus]
    archive: bytes
    files: List[FileData] = field(default_factory=list)

    def status_strings(self) -> Dict[str, str]:
        return {key: status.value for key, status in self.results.items()}

    def archive_base64(self) -> str:
        return base64.b64encode(self.archive).decode("ascii")


def archive_filename(prefix: str, timestamp_ms: Optional[int] = None) -> str:
    """Download name for an archive, e.g. ``cursor-starter-kit-1700000000000.zip``."""
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    return f"{prefix}-{timestamp_ms}.zip"


class KitManager:
    """Wires gateway, resolver, cache and orchestrator together.

    Build one per process: the result cache it owns is shared by every
    request that goes through it.
    """

    def __init__(
        self,
        settings=None,
        gateway: Optional[ModelGateway] = None,
        resolver: Optional[TemplateResolver] = None,
        cache: Optional[ResultCache] = None,
    ):
        """Initialize the Kit Manager.

        Args:
            settings: Settings instance. Defaults to the global settings.
            gateway: Model gateway. Defaults to LiteLLMGateway.
            resolver: Template resolver. Defaults to settings.templates_dir.
            cache: Result cache. Defaults to a cache with settings.cache_ttl_seconds.
        """
        if settings is None:
            from config import settings as global_settings
            settings = global_settings
        self.settings = settings
        self.gateway = gateway or LiteLLMGateway(settings)
        self.resolver = resolver or TemplateResolver(settings.templates_dir)
        self.cache = cache or ResultCache(ttl_seconds=settings.cache_ttl_seconds)
        self.orchestrator = GenerationOrchestrator(
            gateway=self.gateway,
            resolver=self.resolver,
            cache=self.cache,
            max_concurrency=settings.max_concurrency,
        )

    async def build(self, request: GenerationRequest) -> KitResult:
        """Generate every requested document and pack the archive.

        Raises:
            ConfigurationError: If the provider's credential is missing
            TotalFailureError: If dynamic content was requested and none was produced
            ArchiveError: If the archive cannot be written
        """
        handle = self.gateway.configure(request.selected_provider)
        generation = await self.orchestrator.generate(request, handle)
        archive = assemble(generation.files)
        return KitResult(results=generation.results, archive=archive, files=generation.files)

    def save(self, kit: KitResult, output_path: Optional[Path] = None) -> Path:
        """Write the archive and a JSON status summary next to it.

        Returns:
            Path to the written archive
        """
        if output_path is None:
            output_path = self.settings.get_output_path() / archive_filename(self.settings.archive_prefix)
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(kit.archive)

        summary = {
            "archive": output_path.name,
            "results": kit.status_strings(),
            "files": [f.path for f in kit.files],
        }
        summary_path = output_path.with_suffix(".json")
        summary_path.write_text(json.dumps(summary, indent=2))
        return output_path
