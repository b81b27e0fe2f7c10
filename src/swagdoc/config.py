"""Document-level settings loaded from a YAML file and the environment."""

import os
from pathlib import Path
from typing import Mapping

import yaml
from pydantic import BaseModel, ConfigDict

from swagdoc.document import option
from swagdoc.document.api import Option

ENV_PREFIX = "SWAGDOC_"


class DocumentConfig(BaseModel):
    """Overrides for the info, host, base path and schemes of a document."""

    model_config = ConfigDict(extra="forbid")

    title: str | None = None
    description: str | None = None
    version: str | None = None
    terms_of_service: str | None = None
    contact_email: str | None = None
    license_name: str | None = None
    license_url: str | None = None
    host: str | None = None
    base_path: str | None = None
    schemes: list[str] | None = None

    def merged(self, other: "DocumentConfig") -> "DocumentConfig":
        """Return a copy with every value set in ``other`` taking precedence."""
        return self.model_copy(update=other.model_dump(exclude_none=True))

    def options(self) -> list[Option]:
        opts = []
        if self.title is not None:
            opts.append(option.title(self.title))
        if self.description is not None:
            opts.append(option.description(self.description))
        if self.version is not None:
            opts.append(option.version(self.version))
        if self.terms_of_service is not None:
            opts.append(option.terms_of_service(self.terms_of_service))
        if self.contact_email is not None:
            opts.append(option.contact_email(self.contact_email))
        if self.license_name is not None:
            opts.append(option.license_name(self.license_name))
        if self.license_url is not None:
            opts.append(option.license_url(self.license_url))
        if self.host is not None:
            opts.append(option.host(self.host))
        if self.base_path is not None:
            opts.append(option.base_path(self.base_path))
        if self.schemes is not None:
            opts.append(option.schemes(*self.schemes))
        return opts


def load_config(path: Path) -> DocumentConfig:
    """Read a YAML mapping of DocumentConfig fields."""
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping, got {type(data).__name__}")
    return DocumentConfig(**data)


def from_env(environ: Mapping[str, str] | None = None) -> DocumentConfig:
    """Read SWAGDOC_* variables, e.g. SWAGDOC_HOST or SWAGDOC_SCHEMES=http,https."""
    environ = os.environ if environ is None else environ
    values = {}
    for key in ("title", "description", "version", "host", "base_path"):
        value = environ.get(ENV_PREFIX + key.upper())
        if value:
            values[key] = value
    schemes = environ.get(ENV_PREFIX + "SCHEMES")
    if schemes:
        values["schemes"] = [s.strip() for s in schemes.split(",") if s.strip()]
    return DocumentConfig(**values)
