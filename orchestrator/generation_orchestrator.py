"""Generation Orchestrator - turns generation options into documents.

For one request the orchestrator:
1. Flattens GenerationOptions into tasks (rules, one per selected spec, checklist)
2. Serves each task from the result cache, or queues it on the concurrency limiter
3. Waits for every task to settle; one failure never cancels another
4. Returns a status map with exactly one entry per task plus the collected files

Per task: created -> success (cache hit), or created -> queued -> running ->
success | error. There are no retries.
"""

import asyncio
import logging
import re
from typing import Dict, List, Optional, Type

from contracts import (
    ChecklistTask,
    FileData,
    GenerationRequest,
    GenerationResult,
    GenerationTask,
    InvocationResult,
    RulesTask,
    SpecTask,
    TaskKind,
    TaskOutcome,
    TaskStatus,
)
from errors import TotalFailureError
from prompts import (
    ResolvedTemplate,
    TemplateResolver,
    format_tech_stack,
    project_input_variables,
    spec_input_variables,
)
from providers import ModelGateway, ModelHandle
from .limiter import ConcurrencyLimiter
from .result_cache import ResultCache

logger = logging.getLogger(__name__)


_DELIMITED_RE = re.compile(r"--- BEGIN [^\n]*? ---\n?([\s\S]*?)\n?--- END [^\n]*? ---")


def extract_delimited(text: str) -> str:
    """Return the text between ``--- BEGIN x ---`` and ``--- END x ---``.

    Falls back to the raw text when the markers are missing, malformed, or
    enclose nothing.
    """
    match = _DELIMITED_RE.search(text)
    if not match:
        return text
    body = match.group(1).strip()
    return body or text


class GenerationOrchestrator:
    """Runs every requested generation task and accounts for each one."""

    def __init__(
        self,
        gateway: ModelGateway,
        resolver: TemplateResolver,
        cache: ResultCache,
        max_concurrency: int = 3,
    ):
        """Initialize the orchestrator.

        Args:
            gateway: Model gateway used for cache misses
            resolver: Template resolver for prompts and static rule files
            cache: Shared result cache
            max_concurrency: Model calls allowed in flight per request
        """
        self.gateway = gateway
        self.resolver = resolver
        self.cache = cache
        self.max_concurrency = max_concurrency

    # ------------------------------------------------------------------ tasks

    def build_tasks(self, request: GenerationRequest, handle: ModelHandle) -> List[GenerationTask]:
        """Flatten the request's options into tasks, cache keys included.

        Spec kinds the resolver does not recognize are skipped.
        """
        options = request.generation_options
        tech_stack_info = format_tech_stack(request.tech_stack)
        tasks: List[GenerationTask] = []

        if options.rules:
            tasks.append(self._make_task(
                RulesTask,
                key=TaskKind.RULES.value,
                resolved=self.resolver.resolve(TaskKind.RULES),
                variables=project_input_variables(request, tech_stack_info),
                handle=handle,
            ))

        for name in options.selected_specs():
            spec_kind = self.resolver.spec_kind_for(name)
            resolved = self.resolver.resolve(TaskKind.SPEC, spec_kind) if spec_kind else None
            if resolved is None:
                logger.warning("Skipping unknown spec kind: %s", name)
                continue
            tasks.append(self._make_task(
                SpecTask,
                key=spec_kind.value,
                resolved=resolved,
                variables=spec_input_variables(spec_kind, request, tech_stack_info),
                handle=handle,
                spec_kind=spec_kind,
            ))

        if options.checklist:
            tasks.append(self._make_task(
                ChecklistTask,
                key=TaskKind.CHECKLIST.value,
                resolved=self.resolver.resolve(TaskKind.CHECKLIST),
                variables=project_input_variables(request, tech_stack_info),
                handle=handle,
            ))

        return tasks

    def _make_task(
        self,
        task_cls: Type[GenerationTask],
        key: str,
        resolved: ResolvedTemplate,
        variables: Dict[str, str],
        handle: ModelHandle,
        **extra,
    ) -> GenerationTask:
        model = handle.model_for(task_cls.kind)
        return task_cls(
            key=key,
            template=resolved.template,
            output_path=resolved.output_path,
            input_variables=variables,
            model=model,
            cache_key=self.cache.key_for(handle.provider, model, resolved.template, variables),
            **extra,
        )

    # -------------------------------------------------------------- execution

    async def run_task(
        self,
        task: GenerationTask,
        handle: ModelHandle,
        limiter: ConcurrencyLimiter,
    ) -> TaskOutcome:
        """Settle one task. Never raises for model failures."""
        cached = self.cache.get(task.cache_key)
        if cached is not None:
            logger.info("Cache hit for %s", task.key)
            return TaskOutcome(key=task.key, status=TaskStatus.SUCCESS, file=cached, cached=True)

        logger.debug("Queued %s on %s", task.key, task.model)
        result = await limiter.schedule(self._invoke, task, handle)
        if not result.succeeded:
            logger.error(
                "Failed to generate %s (%s): %s",
                task.key, result.error.__class__.__name__, result.error,
            )
            return TaskOutcome(key=task.key, status=TaskStatus.ERROR)

        file = FileData(path=task.output_path, content=self.post_process(task, result.value))
        self.cache.put(task.cache_key, file)
        logger.info("Generated %s", task.key)
        return TaskOutcome(key=task.key, status=TaskStatus.SUCCESS, file=file)

    async def _invoke(self, task: GenerationTask, handle: ModelHandle) -> InvocationResult:
        try:
            text = await self.gateway.invoke(handle, task.template, task.input_variables, model=task.model)
        except Exception as e:
            # Contained here so the failure stays with this task
            return InvocationResult.failed(e)
        return InvocationResult.ok(text)

    @staticmethod
    def post_process(task: GenerationTask, text: str) -> str:
        """Shape raw model output into file content for the task's kind."""
        if task.kind == TaskKind.SPEC:
            return extract_delimited(text)
        if task.kind in (TaskKind.RULES, TaskKind.CHECKLIST):
            return text
        raise ValueError(f"Unhandled task kind: {task.kind}")

    async def generate(
        self,
        request: GenerationRequest,
        handle: ModelHandle,
        limiter: Optional[ConcurrencyLimiter] = None,
    ) -> GenerationResult:
        """Run every requested task and collect the results.

        Args:
            request: Validated generation request
            handle: Configured model handle for the selected provider
            limiter: Admission control for this run. A fresh limiter bounded
                     by max_concurrency is used when omitted.

        Returns:
            GenerationResult with static files first, then generated files

        Raises:
            TotalFailureError: If dynamic content was requested and none was
                generated, including when every selected spec kind is unknown
        """
        limiter = limiter or ConcurrencyLimiter(self.max_concurrency)
        tasks = self.build_tasks(request, handle)
        static_files = self.resolver.load_static_rules()
        logger.info("Running %d generation task(s) with %s", len(tasks), handle.provider)

        status: Dict[str, TaskStatus] = {task.key: TaskStatus.PENDING for task in tasks}
        outcomes = await asyncio.gather(
            *(self.run_task(task, handle, limiter) for task in tasks),
            return_exceptions=True,
        )

        files: List[FileData] = list(static_files)
        cache_hits = 0
        for task, outcome in zip(tasks, outcomes):
            if isinstance(outcome, TaskOutcome) and outcome.status == TaskStatus.SUCCESS:
                status[task.key] = TaskStatus.SUCCESS
                files.append(outcome.file)
                cache_hits += outcome.cached
                continue
            if isinstance(outcome, BaseException):
                logger.error("Task %s did not settle: %r", task.key, outcome)
            status[task.key] = TaskStatus.ERROR

        generated = len(files) - len(static_files)
        if request.generation_options.requests_dynamic_content() and not generated:
            logger.warning(
                "No dynamic content was generated despite %d requested task(s)",
                len(tasks),
            )
            raise TotalFailureError(failed_keys=list(status))

        logger.info("Generated %d document(s), %d served from cache", generated, cache_hits)
        return GenerationResult(results=status, files=files, static_file_count=len(static_files))
