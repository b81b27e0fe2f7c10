"""CLI entry point for swagdoc."""

import importlib
import importlib.util
import logging
import sys
from pathlib import Path
from types import ModuleType

import click
import uvicorn

from swagdoc.config import DocumentConfig, from_env, load_config
from swagdoc.document.api import API
from swagdoc.document.server import make_app
from swagdoc.document.validator import validate_document
from swagdoc.errors import TargetError


def _load_module(module_ref: str) -> ModuleType:
    if module_ref.endswith(".py"):
        path = Path(module_ref)
        if not path.exists():
            raise TargetError(f"no such file: {path}")
        spec = importlib.util.spec_from_file_location(path.stem, path)
        module = importlib.util.module_from_spec(spec)
        # dataclasses resolve string annotations through sys.modules
        sys.modules[path.stem] = module
        spec.loader.exec_module(module)
        return module
    try:
        return importlib.import_module(module_ref)
    except ImportError as e:
        raise TargetError(f"cannot import {module_ref}: {e}") from e


def load_api(target: str) -> API:
    """Resolve ``module:attr`` or ``path/to/file.py:attr`` to an API.

    ``attr`` defaults to ``api`` and may name a zero-argument factory.
    """
    module_ref, _, attr = target.partition(":")
    attr = attr or "api"
    module = _load_module(module_ref)

    try:
        obj = getattr(module, attr)
    except AttributeError:
        raise TargetError(f"{module_ref} has no attribute {attr!r}") from None
    if not isinstance(obj, API) and callable(obj):
        obj = obj()
    if not isinstance(obj, API):
        raise TargetError(f"{target} is not an API document")
    return obj


def detect_format(output: Path | None, fmt: str) -> str:
    """Resolve 'auto' to 'yaml' for .yaml/.yml outputs, 'json' otherwise."""
    if fmt != "auto":
        return fmt
    if output is not None and output.suffix.lower() in (".yaml", ".yml"):
        return "yaml"
    return "json"


def _build_api(target: str, config_path: Path | None) -> API:
    try:
        api = load_api(target)
        config = load_config(config_path) if config_path else DocumentConfig()
    except (TargetError, ValueError) as e:
        raise click.ClickException(str(e)) from e
    api.add_options(*config.merged(from_env()).options())
    return api


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Log definition discovery and endpoint registration.")
def main(verbose: bool):
    """swagdoc: build Swagger 2.0 documents from Python types."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


@main.command()
@click.argument("target")
@click.option("-o", "--output", default=None, type=click.Path(path_type=Path), help="Output file; prints to stdout when omitted.")
@click.option("--format", "fmt", default="auto", type=click.Choice(["auto", "json", "yaml"]), help="Document format.")
@click.option("--config", "config_path", default=None, type=click.Path(exists=True, path_type=Path), help="YAML file with document settings.")
@click.option("--check", is_flag=True, help="Fail on dangling references or duplicate operation ids.")
def export(target: str, output: Path | None, fmt: str, config_path: Path | None, check: bool):
    """Export the document built by TARGET (module:attr or file.py:attr)."""
    api = _build_api(target, config_path)

    if check:
        errors = validate_document(api.to_dict())
        if errors:
            for location, message in errors.items():
                click.echo(f"  {location}: {message}", err=True)
            raise click.ClickException(f"{len(errors)} problem(s) found in {target}")

    fmt = detect_format(output, fmt)
    text = api.to_yaml() if fmt == "yaml" else api.to_json(indent=2)

    if output is None:
        click.echo(text)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text, encoding="utf-8")
    click.echo(f"Document saved to {output}")


@main.command()
@click.argument("target")
@click.option("--host", "bind", default="127.0.0.1", help="Interface to bind.")
@click.option("--port", default=8080, type=int, help="Port to listen on.")
@click.option("--url", default="/swagger.json", help="Path serving the JSON document.")
@click.option("--config", "config_path", default=None, type=click.Path(exists=True, path_type=Path), help="YAML file with document settings.")
def serve(target: str, bind: str, port: int, url: str, config_path: Path | None):
    """Serve the document built by TARGET over HTTP."""
    api = _build_api(target, config_path)
    click.echo(f"Serving {url} on http://{bind}:{port}")
    uvicorn.run(make_app(api, url), host=bind, port=port)
