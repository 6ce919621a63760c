"""Remote .gitignore templates from github/gitignore."""

from __future__ import annotations

import json
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any
from urllib.error import URLError
from urllib.parse import quote
from urllib.request import Request, urlopen

from code_context.constants import (
    APP_NAME,
    PROJECT_TYPE_MARKERS,
    TEMPLATE_RAW_URL,
    TEMPLATE_SUFFIX,
    TEMPLATES_API_URL,
)
from code_context.log import get_logger

logger = get_logger(__name__)

_TEMPLATE_CACHE: dict[str, tuple[float, Any]] = {}


class ITemplateSource(ABC):
    @abstractmethod
    def list_templates(self) -> list[str]:
        """Return available template names; empty when unavailable."""

    @abstractmethod
    def get_template_content(self, name: str) -> str:
        """Return raw template text; empty when unavailable."""


class GitHubTemplateRepository(ITemplateSource):
    def __init__(
        self,
        *,
        api_url: str = TEMPLATES_API_URL,
        raw_url: str = TEMPLATE_RAW_URL,
        ttl_seconds: int = 3600,
        timeout: int = 20,
    ) -> None:
        self.api_url = api_url
        self.raw_url = raw_url
        self.ttl_seconds = ttl_seconds
        self.timeout = timeout

    def list_templates(self) -> list[str]:
        cached = self._cached(self.api_url)
        if cached is not None:
            return list(cached)
        try:
            payload = json.loads(self._fetch(self.api_url))
        except (URLError, OSError, ValueError) as exc:
            logger.warning("Failed to fetch gitignore templates: %s", exc)
            return []
        if not isinstance(payload, list):
            logger.warning("Unexpected template listing payload from %s", self.api_url)
            return []

        names = sorted(
            str(item["name"])[: -len(TEMPLATE_SUFFIX)]
            for item in payload
            if isinstance(item, dict)
            and item.get("type") == "file"
            and str(item.get("name", "")).endswith(TEMPLATE_SUFFIX)
        )
        _TEMPLATE_CACHE[self.api_url] = (time.time(), names)
        return list(names)

    def get_template_content(self, name: str) -> str:
        url = self.raw_url.format(name=quote(name))
        cached = self._cached(url)
        if cached is not None:
            return cached
        try:
            content = self._fetch(url)
        except (URLError, OSError, UnicodeDecodeError) as exc:
            logger.warning("Failed to fetch content for template %s: %s", name, exc)
            return ""
        _TEMPLATE_CACHE[url] = (time.time(), content)
        return content

    def _cached(self, key: str) -> Any | None:
        cached = _TEMPLATE_CACHE.get(key)
        if cached and time.time() - cached[0] < self.ttl_seconds:
            return cached[1]
        return None

    def _fetch(self, url: str) -> str:
        request = Request(url, headers={"User-Agent": APP_NAME})
        with urlopen(request, timeout=self.timeout) as response:
            return response.read().decode("utf-8")


def clear_template_cache() -> None:
    _TEMPLATE_CACHE.clear()


def detect_project_types(project_root: Path) -> list[str]:
    return [
        label
        for label, marker in PROJECT_TYPE_MARKERS
        if (project_root / marker).exists()
    ]
