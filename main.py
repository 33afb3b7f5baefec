#!/usr/bin/env python3
"""fieldmapper - DTO to DAO field mapping tool. Entry point."""
import logging
import sys
from pathlib import Path
from typing import Optional

import click
from colorama import Fore, Style, init

from config import app_config
from fieldmapper.api.description_client import (
    DescriptionClient,
    MalformedRemoteDocument,
    RemoteFetchError,
)
from fieldmapper.cli.interactive import InteractiveCLI
from fieldmapper.cli.session import Command, MappingSession, SessionContext
from fieldmapper.parser.project_locator import ProjectLocator


def print_banner():
    """Print application banner."""
    print(f"{Fore.CYAN}{'=' * 44}")
    print(f"{Fore.CYAN}║   {Fore.WHITE}fieldmapper{Fore.CYAN}                          ║")
    print(f"{Fore.CYAN}║   {Fore.WHITE}DTO → DAO Field Mapping Assistant{Fore.CYAN}    ║")
    print(f"{Fore.CYAN}{'=' * 44}{Style.RESET_ALL}")
    print()


def _select_model_folder(business_path: Path, model_folder: Optional[str]) -> str:
    folders = ProjectLocator.get_model_subfolders(business_path)
    if not folders:
        click.echo(f"{Fore.RED}No subfolders found in dao/model/")
        sys.exit(1)

    if model_folder:
        if model_folder not in folders:
            click.echo(f"{Fore.RED}Model folder not found: {model_folder}")
            sys.exit(1)
        return model_folder

    if len(folders) == 1:
        click.echo(f"{Fore.CYAN}Analyzing model folder: {folders[0]}")
        return folders[0]

    click.echo("Model folders:")
    for i, name in enumerate(folders, 1):
        click.echo(f"{i}. {name}")
    choice = click.prompt("Select model folder", type=click.IntRange(1, len(folders)), default=1)
    return folders[choice - 1]


def _load_project_session(project: str, model_folder: Optional[str], backend_type: str) -> MappingSession:
    locator = ProjectLocator(Path(project))
    business_path = locator.find_business_folder()
    if business_path is None:
        click.echo(f"{Fore.RED}No business/vN folder found in {project}")
        sys.exit(1)

    click.echo(f"{Fore.GREEN}Business folder: {business_path}")
    selected = _select_model_folder(business_path, model_folder)
    catalog = locator.build_catalog(business_path, selected)

    if not catalog.source:
        click.echo(f"{Fore.YELLOW}No DTO fields found in dto/")
        sys.exit(1)
    if not catalog.target:
        click.echo(f"{Fore.YELLOW}No @Campo DAO fields found in {selected}")
        sys.exit(1)

    context = SessionContext(trx_name=selected, backend_type=backend_type, document_id=selected)
    return MappingSession(catalog, context, app_config.mapper)


@click.group()
@click.version_option(version="0.1.0")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose):
    """fieldmapper - Map DTO fields to DAO fields for code generation."""
    init(autoreset=True)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.command("list-models")
@click.argument("project", type=click.Path(exists=True, file_okay=False))
def list_models(project):
    """List dao/model subfolders of a project."""
    business_path = ProjectLocator(Path(project)).find_business_folder()
    if business_path is None:
        click.echo(f"{Fore.RED}No business/vN folder found in {project}")
        sys.exit(1)

    for name in ProjectLocator.get_model_subfolders(business_path):
        click.echo(name)


@cli.command("map")
@click.argument("project", type=click.Path(exists=True, file_okay=False))
@click.option("--model-folder", help="dao/model subfolder to map against")
@click.option("--backend-type", default="", help="Backend type for the exported document")
@click.option("--output-dir", default=None, help="Directory for exported JSON")
def map_fields(project, model_folder, backend_type, output_dir):
    """Edit mappings interactively."""
    print_banner()
    session = _load_project_session(project, model_folder, backend_type)
    InteractiveCLI(session, output_dir).run()


@cli.command("auto-map")
@click.argument("project", type=click.Path(exists=True, file_okay=False))
@click.option("--model-folder", help="dao/model subfolder to map against")
@click.option("--backend-type", default="", help="Backend type for the exported document")
@click.option("--output-dir", default=None, help="Directory for exported JSON")
def auto_map(project, model_folder, backend_type, output_dir):
    """Auto-map and export without prompting."""
    session = _load_project_session(project, model_folder, backend_type)
    _auto_export(session, output_dir)


@cli.command("fetch")
@click.argument("url", required=False)
@click.option("--backend", "backend_index", default=1, type=int, help="backendAccess entry to use (1-based)")
@click.option("--auto", "non_interactive", is_flag=True, help="Auto-map and export without prompting")
@click.option("--output-dir", default=None, help="Directory for exported JSON")
def fetch(url, backend_index, non_interactive, output_dir):
    """Map fields from a remote service description."""
    client = DescriptionClient(app_config.remote)

    try:
        description = client.get_description(url)
    except (RemoteFetchError, MalformedRemoteDocument) as e:
        click.echo(f"{Fore.RED}❌ {e}")
        sys.exit(1)

    if not description.catalog.total_source_fields:
        click.echo(f"{Fore.YELLOW}No DTO fields found in the service description")
        sys.exit(1)
    if not description.catalog.total_target_fields:
        click.echo(f"{Fore.YELLOW}No DAO fields found in the service description")
        sys.exit(1)

    if not 1 <= backend_index <= len(description.backends):
        click.echo(f"{Fore.RED}Invalid backend index: {backend_index}")
        sys.exit(1)

    backend = description.backends[backend_index - 1]
    context = SessionContext(
        trx_name=backend.trx_name,
        backend_type=backend.backend_type,
        document_id=description.name or backend.trx_name,
    )
    session = MappingSession(description.catalog, context, app_config.mapper)

    if non_interactive:
        _auto_export(session, output_dir)
    else:
        print_banner()
        InteractiveCLI(session, output_dir).run()


def _auto_export(session: MappingSession, output_dir: Optional[str]):
    created = session.handle(Command.AUTO_MAP)
    click.echo(f"{Fore.GREEN}Auto-mapped {len(created)} fields")
    for association in created:
        for warning in association.warnings:
            click.echo(f"{Fore.YELLOW}⚠️  {warning}")

    target_dir = Path(output_dir or app_config.output_dir)
    exporter = session.exporter
    summary = exporter.export(target_dir / "mapping_summary.json", session.handle(Command.EXPORT_SUMMARY))
    document = exporter.export(target_dir / "mapping_document.json", session.handle(Command.EXPORT_DOCUMENT))
    click.echo(f"{Fore.GREEN}✅ Exported {summary} and {document}")


if __name__ == "__main__":
    cli()
