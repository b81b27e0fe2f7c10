"""Options applied to an ``API`` by ``swagdoc.new`` or ``API.add_options``."""

from typing import Callable

from swagdoc.document.api import API, Option
from swagdoc.document.base import Contact, Endpoint, SecurityRequirement, SecurityScheme, Tag, TagDocs
from swagdoc.errors import InvalidLocationError

SecuritySchemeOption = Callable[[SecurityScheme], None]
TagOption = Callable[[Tag], None]

API_KEY_LOCATIONS = ("header", "query")


def description(v: str) -> Option:
    def apply(api: API) -> None:
        api.info.description = v
    return apply


def version(v: str) -> Option:
    def apply(api: API) -> None:
        api.info.version = v
    return apply


def terms_of_service(v: str) -> Option:
    def apply(api: API) -> None:
        api.info.terms_of_service = v
    return apply


def title(v: str) -> Option:
    def apply(api: API) -> None:
        api.info.title = v
    return apply


def contact_email(v: str) -> Option:
    def apply(api: API) -> None:
        if api.info.contact is None:
            api.info.contact = Contact()
        api.info.contact.email = v
    return apply


def license(name: str, url: str) -> Option:
    def apply(api: API) -> None:
        api.info.license.name = name
        api.info.license.url = url
    return apply


def license_name(v: str) -> Option:
    """Set the license name, keeping the current URL."""
    def apply(api: API) -> None:
        api.info.license.name = v
    return apply


def license_url(v: str) -> Option:
    def apply(api: API) -> None:
        api.info.license.url = v
    return apply


def base_path(v: str) -> Option:
    def apply(api: API) -> None:
        api.base_path = v
    return apply


def schemes(*v: str) -> Option:
    def apply(api: API) -> None:
        api.schemes = list(v)
    return apply


def host(v: str) -> Option:
    def apply(api: API) -> None:
        api.host = v
    return apply


def endpoints(*items: Endpoint) -> Option:
    def apply(api: API) -> None:
        api.add_endpoint(*items)
    return apply


def security(scheme: str, *scopes: str) -> Option:
    """Add a default security requirement for every endpoint."""
    def apply(api: API) -> None:
        if api.security is None:
            api.security = SecurityRequirement()
        api.security.add(scheme, *scopes)
    return apply


def security_scheme(name: str, *options: SecuritySchemeOption) -> Option:
    def apply(api: API) -> None:
        scheme = SecurityScheme()
        for opt in options:
            opt(scheme)
        api.security_definitions[name] = scheme
    return apply


def security_scheme_description(v: str) -> SecuritySchemeOption:
    def apply(scheme: SecurityScheme) -> None:
        scheme.description = v
    return apply


def basic_security() -> SecuritySchemeOption:
    def apply(scheme: SecurityScheme) -> None:
        scheme.type = "basic"
    return apply


def api_key_security(name: str, in_: str) -> SecuritySchemeOption:
    """API key authentication; ``in_`` is where the key is sent, header or query."""
    if in_ not in API_KEY_LOCATIONS:
        raise InvalidLocationError('api_key_security "in_" parameter must be one of: "header" or "query"')

    def apply(scheme: SecurityScheme) -> None:
        scheme.type = "apiKey"
        scheme.name = name
        scheme.in_ = in_
    return apply


def oauth2_security(flow: str, authorization_url: str, token_url: str) -> SecuritySchemeOption:
    """OAuth2 authentication; flow is one of implicit, password, application or accessCode."""
    def apply(scheme: SecurityScheme) -> None:
        scheme.type = "oauth2"
        scheme.flow = flow
        scheme.authorization_url = authorization_url
        scheme.token_url = token_url
    return apply


def oauth2_scope(scope: str, description: str) -> SecuritySchemeOption:
    def apply(scheme: SecurityScheme) -> None:
        scheme.scopes[scope] = description
    return apply


def tag(name: str, description: str, *options: TagOption) -> Option:
    def apply(api: API) -> None:
        t = Tag(name=name, description=description)
        for opt in options:
            opt(t)
        api.tags.append(t)
    return apply


def tag_description(v: str) -> TagOption:
    """Set the description of the tag's external docs."""
    def apply(t: Tag) -> None:
        if t.docs is None:
            t.docs = TagDocs()
        t.docs.description = v
    return apply


def tag_url(v: str) -> TagOption:
    def apply(t: Tag) -> None:
        if t.docs is None:
            t.docs = TagDocs()
        t.docs.url = v
    return apply
