"""API document aggregator.

``API`` owns the path table and the global definitions map. Registering an
endpoint puts it in its path/method slot and merges every definition reachable
from its body and response schemas, keeping the first registration of a name.
"""

import json
import logging
import posixpath
from typing import Any, Callable

import yaml
from pydantic import Field, PrivateAttr

from swagdoc.document.base import Endpoint, Endpoints, Info, License, Method, SecurityRequirement, SecurityScheme, Tag
from swagdoc.schema.base import Object, SwaggerModel
from swagdoc.schema.reflect import define

logger = logging.getLogger(__name__)

Option = Callable[["API"], None]


class API(SwaggerModel):
    """Top level Swagger 2.0 document."""

    swagger: str = ""
    info: Info = Field(default_factory=Info)
    base_path: str = Field(default="", alias="basePath")
    schemes: list[str] = Field(default_factory=list)
    paths: dict[str, Endpoints] = Field(default_factory=dict)
    definitions: dict[str, Object] = Field(default_factory=dict)
    tags: list[Tag] = Field(default_factory=list)
    host: str = ""
    security_definitions: dict[str, SecurityScheme] = Field(default_factory=dict, alias="securityDefinitions")
    security: SecurityRequirement | None = None

    _active_tags: list[Tag] = PrivateAttr(default_factory=list)

    def add_endpoint(self, *endpoints: Endpoint) -> None:
        """Register endpoints; a method+path pair registered twice keeps the last endpoint.

        Methods are checked before anything is registered, and the tags
        activated by ``with_tags`` are consumed even when registration fails.
        """
        try:
            for e in endpoints:
                Method.parse(e.method)
            active = [tag.name for tag in self._active_tags]
            for e in endpoints:
                e.tags.extend(active)
                self._add_path(e)
                self._add_definitions(e)
        finally:
            self._active_tags = []

    def add_endpoint_func(self, *fns: Callable[["API"], None]) -> None:
        """Run registration callbacks, then drop any tags still activated by ``with_tags``."""
        try:
            for fn in fns:
                fn(self)
        finally:
            self._active_tags = []

    def _add_path(self, e: Endpoint) -> None:
        slot = self.paths.get(e.path) or Endpoints()
        slot.assign(e)
        self.paths[e.path] = slot
        logger.debug("registered %s %s", e.method, e.path)

    def _add_definitions(self, e: Endpoint) -> None:
        for schema in e.schemas():
            for name, obj in define(schema.prototype).items():
                if name in self.definitions:
                    logger.debug("definition %s already registered, keeping the first", name)
                    continue
                self.definitions[name] = obj

    def add_options(self, *options: Option) -> None:
        for option in options:
            option(self)

    def add_tag(self, name: str, description: str = "") -> None:
        self.tags.append(Tag(name=name, description=description))

    def with_tags(self, *tags: Tag) -> "API":
        """Add unseen tags and apply them to the endpoints of the next ``add_endpoint`` call."""
        known = {tag.name for tag in self.tags}
        for tag in tags:
            if tag.name in known:
                continue
            self.tags.append(tag)
            known.add(tag.name)
        self._active_tags = list(tags)
        return self

    def clone(self) -> "API":
        """Shallow copy: paths and definitions are shared with the original."""
        return self.model_copy()

    def walk(self, callback: Callable[[str, Endpoint], None]) -> None:
        """Invoke ``callback`` with the base-path-joined path of every endpoint."""
        for raw_path, endpoints in self.paths.items():
            full = self.full_path(raw_path)
            endpoints.walk(lambda endpoint: callback(full, endpoint))

    def full_path(self, raw_path: str) -> str:
        """Join a registered path onto the base path, e.g. /v2 + /pet -> /v2/pet."""
        return posixpath.normpath(self.base_path.rstrip("/") + "/" + raw_path.lstrip("/"))

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)

    def to_json(self, indent: int | None = None) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    def to_yaml(self) -> str:
        return yaml.safe_dump(self.to_dict(), sort_keys=False, allow_unicode=True)


def new(*options: Option) -> API:
    """Construct an API document with default info, then apply the options."""
    api = API(
        swagger="2.0",
        base_path="/",
        schemes=["http"],
        info=Info(
            description="Describe your API",
            title="Your API Title",
            version="SNAPSHOT",
            terms_of_service="https://swagger.io/terms/",
            license=License(
                name="Apache 2.0",
                url="https://www.apache.org/licenses/LICENSE-2.0.html",
            ),
        ),
    )
    api.add_options(*options)
    return api
