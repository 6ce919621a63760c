"""Turn selected rules plus a mode into the pattern list handed to the matcher."""

from __future__ import annotations

from typing import Optional

from code_context.constants import GIT_DIR_PATTERN, MATCH_ALL_PATTERN
from code_context.log import get_logger
from code_context.models import GenerationRequest, Mode, ResolutionStatus, ResolvedPatterns
from code_context.resolution.paths import PathResolver, include_rule
from code_context.utils import normalize_separators

logger = get_logger(__name__)


def output_exclusion(relative_output: Optional[str]) -> list[str]:
    if not relative_output:
        return []
    return [f"/{relative_output.lstrip('/')}"]


class ModeResolver:
    def __init__(
        self, path_resolver: PathResolver, relative_output: Optional[str] = None
    ) -> None:
        self._paths = path_resolver
        self._output_patterns = output_exclusion(relative_output)

    def resolve(self, request: GenerationRequest) -> ResolvedPatterns:
        selected = [
            normalize_separators(rule.strip())
            for rule in request.selected_rules
            if rule.strip()
        ]
        if request.mode == Mode.INCLUDE:
            return self._resolve_include(selected)
        return self._resolve_exclude(selected, request.confirmed)

    def _resolve_exclude(self, selected: list[str], confirmed: bool) -> ResolvedPatterns:
        patterns = [GIT_DIR_PATTERN, *selected, *self._output_patterns]
        if not selected and not confirmed:
            return ResolvedPatterns(patterns, ResolutionStatus.NEEDS_CONFIRMATION)
        return ResolvedPatterns(patterns, ResolutionStatus.READY)

    def _resolve_include(self, selected: list[str]) -> ResolvedPatterns:
        selected = [rule for rule in selected if include_rule(rule)]
        if not selected:
            logger.warning("Include mode has no selected rules; nothing to generate")
            return ResolvedPatterns([MATCH_ALL_PATTERN], ResolutionStatus.EMPTY_WHITELIST)

        patterns = [MATCH_ALL_PATTERN]
        truncated: list[str] = []
        for rule in selected:
            resolution = self._paths.resolve(rule)
            logger.debug("Rule %r resolved to %s", rule, resolution.patterns)
            patterns.extend(resolution.patterns)
            if resolution.truncated:
                truncated.append(resolution.rule)
        patterns.extend(self._output_patterns)
        return ResolvedPatterns(patterns, ResolutionStatus.READY, truncated)
