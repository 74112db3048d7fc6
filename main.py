#!/usr/bin/env python3
"""provider-modelgen - Entry point."""
import logging
import sys
from pathlib import Path

import click
from colorama import Fore, Style, init

from config import AppConfig
from modelgen import __version__
from modelgen.builder import ModelBuilder
from modelgen.dedup import NameRegistry
from modelgen.errors import ConfigError, ModelGenError
from modelgen.exporter import JsonExporter
from modelgen.introspection import DocumentLoader, SchemaProvider

# Initialize colorama
init(autoreset=True)

logger = logging.getLogger(__name__)


def print_banner():
    """Print application banner."""
    print(f"{Fore.CYAN}{'=' * 44}")
    print(f"{Fore.CYAN}║   {Fore.WHITE}provider-modelgen{Fore.CYAN}                    ║")
    print(f"{Fore.CYAN}║   {Fore.WHITE}OpenAPI → Resource Models{Fore.CYAN}            ║")
    print(f"{Fore.CYAN}{'=' * 44}{Style.RESET_ALL}")
    print()


def setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
        force=True,
    )


def load_config(ctx: click.Context) -> AppConfig:
    """Load and validate configuration, exiting on errors."""
    try:
        config = AppConfig.from_env(ctx.obj.get("config_path"))
        config.validate()
    except ConfigError as e:
        click.echo(f"{Fore.RED}❌ Invalid configuration: {e}")
        sys.exit(1)

    setup_logging("DEBUG" if ctx.obj.get("verbose") else config.log_level)
    return config


def load_provider(config: AppConfig, no_cache: bool = False) -> SchemaProvider:
    """Load the OpenAPI document and check the configured operations against it."""
    loader = DocumentLoader(config.schema_source(), token=config.api_token or None, use_cache=not no_cache)
    provider = loader.load_provider()
    click.echo(f"{Fore.CYAN}Loaded {provider.title} {provider.version} ({provider.operation_count} operations)")
    config.validate_operations(provider)
    return provider


def load_builder(config: AppConfig, no_cache: bool = False) -> ModelBuilder:
    return ModelBuilder(config, load_provider(config, no_cache))


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "config_path", type=click.Path(), default=None, help="Path to generator config YAML")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, config_path, verbose):
    """provider-modelgen - Build canonical resource models from an OpenAPI document."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["verbose"] = verbose


@cli.command()
@click.option("--output", "-o", type=click.Path(), default=None, help="Output JSON file")
@click.option("--no-cache", is_flag=True, help="Always fetch remote documents")
@click.pass_context
def generate(ctx, output, no_cache):
    """Generate models for every configured resource and data source."""
    print_banner()
    config = load_config(ctx)

    try:
        builder = load_builder(config, no_cache)
        models, registry = builder.build_all()
        output_file = Path(output) if output else Path(config.generator.output_dir) / "models.json"
        exporter = JsonExporter(provider_name=config.generator.provider_name, source=config.generator.openapi_schema)
        exporter.export(output_file, models, registry)
    except ModelGenError as e:
        click.echo(f"{Fore.RED}❌ Generation failed: {e}")
        sys.exit(1)

    click.echo(f"{Fore.GREEN}✅ Generated {len(models)} models")
    click.echo(f"{Fore.GREEN}   Nested types: {len(registry)}")
    click.echo(f"{Fore.GREEN}   Written to: {output_file}")


@cli.command()
@click.argument("name")
@click.option("--no-cache", is_flag=True, help="Always fetch remote documents")
@click.pass_context
def inspect(ctx, name, no_cache):
    """Show the reconciled fields of one resource or data source."""
    config = load_config(ctx)
    resource = config.get_resource(name)
    data_source = config.get_data_source(name)
    if resource is None and data_source is None:
        click.echo(f"{Fore.RED}Unknown resource: {name}")
        sys.exit(1)

    try:
        builder = load_builder(config, no_cache)
        registry = NameRegistry()
        if resource is not None:
            model = builder.build_resource(resource, registry)
        else:
            model = builder.build_data_source(data_source, registry)
    except ModelGenError as e:
        click.echo(f"{Fore.RED}❌ {e}")
        sys.exit(1)

    click.echo(f"\n{Fore.CYAN}{'━' * 60}")
    click.echo(f"{Fore.CYAN}{model.name} ({model.plugin}{', data source' if model.is_data_source_only else ''})")
    click.echo(f"{Fore.CYAN}{'━' * 60}{Style.RESET_ALL}")

    for field in model.model_fields:
        if field.required:
            color, role = Fore.GREEN, "required"
        elif field.read_only:
            color, role = Fore.YELLOW, "read-only"
        elif field.server_computed:
            color, role = Fore.CYAN, "computed"
        else:
            color, role = Fore.WHITE, "optional"

        flags = [flag for flag, on in (("force_new", field.force_new), ("skip", field.schema_skip)) if on]
        type_name = field.attr_type_ref or field.resolved_type()
        click.echo(f"{color}{field.name:<30} {type_name:<28} {role:<10} {' '.join(flags)}")

    if model.nested_structs:
        click.echo(f"\n{Fore.CYAN}Nested types: {', '.join(s.attr_type_ref for s in model.nested_structs)}")


@cli.command("validate-config")
@click.option("--no-cache", is_flag=True, help="Always fetch remote documents")
@click.pass_context
def validate_config(ctx, no_cache):
    """Validate the generator configuration against the OpenAPI document."""
    config = load_config(ctx)

    try:
        load_provider(config, no_cache)
    except ModelGenError as e:
        click.echo(f"{Fore.RED}❌ Invalid configuration: {e}")
        sys.exit(1)

    click.echo(f"{Fore.GREEN}✅ Configuration is valid")
    click.echo(f"{Fore.GREEN}   Resources: {len(config.resources)}")
    click.echo(f"{Fore.GREEN}   Data sources: {len(config.data_sources)}")


if __name__ == "__main__":
    cli()
