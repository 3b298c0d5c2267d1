"""Pydantic configuration models for the watch exporter."""

from pathlib import Path
from typing import Dict, List, Optional
import re

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


LABEL_NAME_RE = re.compile(r'^[a-zA-Z_][a-zA-Z0-9_]*$')
RESERVED_LABELS = {"name"}


class WatchSpec(BaseModel):
    """One named filesystem root to monitor, with its filter and traversal policy."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(min_length=1)
    path: Path
    recursive: bool = False
    file_regex: Optional[re.Pattern] = None  # None matches every file
    labels: Dict[str, str] = Field(default_factory=dict)

    @field_validator('path', mode='before')
    @classmethod
    def reject_empty_path(cls, v):
        """Reject empty or whitespace-only paths."""
        if isinstance(v, str) and not v.strip():
            raise ValueError('path must not be empty')
        return v

    @field_validator('file_regex', mode='before')
    @classmethod
    def compile_file_regex(cls, v):
        """Compile the file pattern once; an empty pattern matches everything."""
        if v is None or isinstance(v, re.Pattern):
            return v
        if not isinstance(v, str):
            raise ValueError('file_regex must be a string')
        if v == "":
            return None
        try:
            return re.compile(v)
        except re.error as e:
            raise ValueError(f'invalid file pattern {v!r}: {e}')

    @field_validator('labels')
    @classmethod
    def validate_label_names(cls, v: Dict[str, str]) -> Dict[str, str]:
        """Label keys become Prometheus label names."""
        for key in v:
            if not LABEL_NAME_RE.match(key):
                raise ValueError(f'invalid label name: {key!r}')
            if key.startswith('__'):
                raise ValueError(f'label names starting with "__" are reserved: {key!r}')
            if key in RESERVED_LABELS:
                raise ValueError(f'label name {key!r} is reserved for the watch name')
        return v

    def matches(self, path_text: str) -> bool:
        """Return True if a file's full path passes this watch's filter."""
        if self.file_regex is None:
            return True
        return self.file_regex.search(path_text) is not None


class ExporterConfig(BaseModel):
    """Root configuration model for the exporter process."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    listen_address: str = "0.0.0.0"
    listen_port: int = Field(ge=1, le=65535)
    scrape_timeout_seconds: Optional[float] = Field(default=None, gt=0)
    file_watchers: List[WatchSpec] = Field(default_factory=list)

    @model_validator(mode='after')
    def unique_watch_names(self) -> 'ExporterConfig':
        """Watch names are the only label telling watches apart."""
        seen = set()
        duplicates = []
        for spec in self.file_watchers:
            if spec.name in seen and spec.name not in duplicates:
                duplicates.append(spec.name)
            seen.add(spec.name)
        if duplicates:
            raise ValueError(f'duplicate watch names: {", ".join(duplicates)}')
        return self

    def label_names(self) -> List[str]:
        """Sorted union of the extra label keys of all watches."""
        keys = set()
        for spec in self.file_watchers:
            keys.update(spec.labels)
        return sorted(keys)
