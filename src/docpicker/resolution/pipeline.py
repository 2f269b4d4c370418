"""High-level resolution pipeline orchestration."""

from __future__ import annotations

import logging
from typing import Mapping

import httpx

from docpicker.config.models import DocPickerConfig

from .classifier import ReferenceClassifier, ReferenceKind
from .content import ContentResolver, DisplayNameLookup, FileContentResolver
from .materializer import ByteMaterializer
from .mime import MimeTypeResolver
from .models import ResolutionRecord
from .strategies import (
    ContentHandleStrategy,
    LocalPathStrategy,
    RemoteUrlStrategy,
    ResolutionStrategy,
)

LOGGER = logging.getLogger(__name__)


class DocumentResolver:
    """Classify references and hand them to the matching strategy."""

    def __init__(
        self,
        materializer: ByteMaterializer,
        strategies: Mapping[ReferenceKind, ResolutionStrategy],
        classifier: ReferenceClassifier | None = None,
    ) -> None:
        missing = [kind.value for kind in ReferenceKind if kind not in strategies]
        if missing:
            raise ValueError(f"No strategy registered for: {', '.join(missing)}")
        self.materializer = materializer
        self.strategies = dict(strategies)
        self.classifier = classifier or ReferenceClassifier()
        self._owned_client: httpx.Client | None = None

    def __enter__(self) -> "DocumentResolver":
        return self

    def __exit__(self, *_: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the HTTP client when this resolver created it."""
        if self._owned_client is not None:
            self._owned_client.close()
            self._owned_client = None

    @classmethod
    def build(
        cls,
        materializer: ByteMaterializer,
        *,
        content_resolver: ContentResolver | None = None,
        http_client: httpx.Client | None = None,
        mime_resolver: MimeTypeResolver | None = None,
        content_schemes: tuple[str, ...] = ("content", "file"),
    ) -> "DocumentResolver":
        """Wire the three standard strategies around shared collaborators."""
        mime = mime_resolver or MimeTypeResolver()
        resolver = content_resolver or FileContentResolver(mime)
        names = DisplayNameLookup(resolver, content_schemes)
        client = http_client or httpx.Client(follow_redirects=True)
        instance = cls(
            materializer,
            {
                ReferenceKind.LOCAL_PATH: LocalPathStrategy(materializer, mime),
                ReferenceKind.REMOTE_URL: RemoteUrlStrategy(materializer, mime, names, client),
                ReferenceKind.CONTENT_HANDLE: ContentHandleStrategy(materializer, resolver, names),
            },
        )
        if http_client is None:
            instance._owned_client = client
        return instance

    @classmethod
    def from_config(
        cls,
        config: DocPickerConfig,
        *,
        content_resolver: ContentResolver | None = None,
        http_client: httpx.Client | None = None,
    ) -> "DocumentResolver":
        """Build a resolver from loaded configuration."""
        materializer = ByteMaterializer(
            config.cache.directory,
            prefix=config.cache.prefix,
            buffer_size=config.cache.buffer_size,
        )
        client = http_client or httpx.Client(
            timeout=httpx.Timeout(config.remote.timeout_seconds),
            follow_redirects=config.remote.follow_redirects,
            headers={"User-Agent": config.remote.user_agent},
        )
        instance = cls.build(
            materializer,
            content_resolver=content_resolver,
            http_client=client,
            content_schemes=tuple(config.content.schemes),
        )
        if http_client is None:
            instance._owned_client = client
        return instance

    def resolve(self, reference: str) -> ResolutionRecord:
        """Resolve ``reference`` into a record, omitting whatever could not be determined.

        Raises:
            CacheDirectoryError: If the cache directory is unusable.
        """
        self.materializer.ensure_cache_dir()
        kind = self.classifier.classify(reference)
        LOGGER.debug("Resolving %s with the %s strategy", reference, kind.value)
        return self.strategies[kind].resolve(reference)


__all__ = ["DocumentResolver"]
