"""
Command-line interface for geneannot
"""

import sys
from pathlib import Path
from typing import List, Optional

import click

from . import __version__, check_dependencies, get_info
from .config import Config, get_default_config, load_config, save_config
from .core import GeneAnnotationPipeline
from .genomics import Location, read_locations, write_gene_table
from .utils import setup_logging, validate_environment, validate_input_files


class CLIContext:
    def __init__(self):
        self.config_file: Optional[Path] = None
        self.config: Optional[Config] = None
        self.verbose: bool = False
        self.quiet: bool = False

    @property
    def log_level(self) -> str:
        return "DEBUG" if self.verbose else "WARNING" if self.quiet else "INFO"


def _fail(message: str, cli_ctx: Optional[CLIContext] = None) -> None:
    click.echo(message, err=True)
    if cli_ctx is not None and cli_ctx.verbose:
        import traceback

        traceback.print_exc()
    sys.exit(1)


@click.group()
@click.version_option(__version__)
@click.option(
    "--config", "-c", type=click.Path(exists=True), help="Configuration file path"
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option("--quiet", "-q", is_flag=True, help="Enable quiet mode (minimal output)")
@click.pass_context
def main(ctx, config, verbose, quiet):
    """
    geneannot: annotate genomic locations with nearby genes

    Reports, for each location, the genes it lies in or near with their
    promoter / exonic / intronic classification and TSS distance, and the
    N closest genes.
    """
    cli_ctx = CLIContext()
    cli_ctx.verbose = verbose
    cli_ctx.quiet = quiet

    setup_logging(level=cli_ctx.log_level)

    if config:
        cli_ctx.config_file = Path(config)
        cli_ctx.config = load_config(cli_ctx.config_file)

    ctx.obj = cli_ctx


@main.command()
def info():
    """Show geneannot package information"""

    info_data = get_info()

    click.echo("=" * 50)
    click.echo(f"geneannot v{info_data['version']}")
    click.echo("=" * 50)
    click.echo(f"Description: {info_data['description']}")
    click.echo(f"Python version: {info_data['python_version']}")
    click.echo()

    click.echo("Available modules:")
    for module in info_data["modules"]:
        click.echo(f"  - {module}")
    click.echo()

    deps = check_dependencies()
    click.echo("Dependency status:")
    for dep, available in deps.items():
        status = "✓" if available else "✗"
        click.echo(f"  {status} {dep}")


@main.command()
@click.argument("output_file", type=click.Path())
@click.option(
    "--format",
    type=click.Choice(["yaml", "json"]),
    default="yaml",
    help="Output format for configuration file",
)
def init_config(output_file, format):
    """Initialize a new geneannot configuration file"""

    output_path = Path(output_file)

    if output_path.exists():
        if not click.confirm(f"File {output_path} already exists. Overwrite?"):
            click.echo("Configuration initialization cancelled.")
            return

    if format == "json" and output_path.suffix.lower() != ".json":
        output_path = output_path.with_suffix(".json")

    try:
        save_config(get_default_config(), output_path)
    except OSError as e:
        _fail(f"Error creating configuration file: {e}")

    click.echo(f"Configuration file created: {output_path}")
    click.echo("Edit this file to set the gene database and annotation parameters.")


@main.command()
@click.argument("config_file", type=click.Path(exists=True))
def validate_config(config_file):
    """Validate a geneannot configuration file"""

    from .config import validate_config as validate_config_func

    try:
        config = load_config(config_file)
    except (OSError, ValueError, TypeError) as e:
        _fail(f"Configuration validation failed: {e}")

    click.echo(f"Configuration loaded successfully: {config_file}")

    issues = validate_config_func(config)

    if not issues:
        click.echo("✓ Configuration is valid")
    else:
        click.echo("Configuration issues found:")
        for issue in issues:
            click.echo(f"  ✗ {issue}")
        sys.exit(1)


@main.command()
@click.pass_context
def check_env(ctx):
    """Check geneannot environment, dependencies and configured inputs"""

    click.echo("Checking geneannot environment...")
    click.echo()

    deps = check_dependencies()

    click.echo("Python dependencies:")
    for dep, available in deps.items():
        status = "✓" if available else "✗"
        click.echo(f"  {status} {dep}")

    click.echo()

    if validate_environment():
        click.echo("✗ Environment check failed. Please install missing dependencies.")
        click.echo("  - Python packages: pip install geneannot")
        sys.exit(1)

    cli_ctx = ctx.obj
    if cli_ctx.config is not None:
        issues = validate_input_files(cli_ctx.config)
        if issues:
            click.echo("✗ Configured inputs are not usable:")
            for issue in issues:
                click.echo(f"  - {issue}")
            sys.exit(1)
        click.echo("✓ Configured inputs are readable")
        click.echo()

    click.echo("✓ Environment check passed!")


@main.command()
@click.argument("locations", nargs=-1)
@click.option(
    "--input",
    "-i",
    "input_file",
    type=click.Path(exists=True),
    help="File of locations (chr:start-end per line, or BED)",
)
@click.option(
    "--db",
    "database",
    type=click.Path(exists=True),
    help="Gene database (SQLite) or feature table",
)
@click.option("--output", "-o", type=click.Path(), help="Output TSV file")
@click.option("--offset-5p", type=click.IntRange(min=0), help="Promoter bp upstream")
@click.option("--offset-3p", type=click.IntRange(min=0), help="Promoter bp downstream")
@click.option(
    "-n", "--n-closest", type=click.IntRange(min=1), help="Closest genes to report"
)
@click.option(
    "--threads", type=click.IntRange(min=1), help="Threads per location for queries"
)
@click.option("--jobs", "-j", type=int, help="Locations annotated in parallel")
@click.option("--fail-fast", is_flag=True, help="Stop at the first failed location")
@click.pass_context
def annotate(
    ctx,
    locations,
    input_file,
    database,
    output,
    offset_5p,
    offset_3p,
    n_closest,
    threads,
    jobs,
    fail_fast,
):
    """Annotate LOCATIONS (chr:start-end) with overlapping and closest genes"""

    cli_ctx = ctx.obj
    config = cli_ctx.config if cli_ctx.config is not None else get_default_config()

    # Command line options override the configuration file
    if database:
        config.database = str(database)
    if offset_5p is not None:
        config.annotation["tss_region"]["offset_5p"] = offset_5p
    if offset_3p is not None:
        config.annotation["tss_region"]["offset_3p"] = offset_3p
    if n_closest is not None:
        config.annotation["n_closest"] = n_closest
    if threads is not None:
        config.annotation["max_workers"] = threads
    if jobs is not None:
        config.batch["n_jobs"] = jobs
    if fail_fast:
        config.batch["fail_fast"] = True

    if not config.database:
        _fail("Error: No gene database provided. Use --db or set 'database' in config")

    try:
        parsed: List[Location] = [Location.parse(text) for text in locations]
        if input_file:
            parsed.extend(read_locations(input_file))
        elif not parsed and config.input_file:
            parsed.extend(read_locations(config.input_file))
    except (OSError, ValueError) as e:
        _fail(f"Invalid locations: {e}", cli_ctx)

    if not parsed:
        _fail("Error: No locations given. Pass LOCATIONS or use --input")

    try:
        pipeline = GeneAnnotationPipeline(config, log_level=cli_ctx.log_level)
        try:
            table = pipeline.annotate_locations(parsed)
            failed = pipeline.get_failed_locations()
        finally:
            pipeline.close()
    except Exception as e:
        _fail(f"Annotation failed: {e}", cli_ctx)

    if output:
        write_gene_table(table, output)
        click.echo(f"Annotated {len(parsed)} locations. Table saved to: {output}")
    else:
        click.echo(write_gene_table(table), nl=False)

    if failed:
        click.echo(f"{len(failed)} locations failed to annotate", err=True)
        sys.exit(1)


@main.command()
@click.option("--output", "-o", type=click.Path(), help="Output TSV file")
@click.pass_context
def run(ctx, output):
    """Run the configured annotation pipeline"""

    cli_ctx = ctx.obj

    if cli_ctx.config is None:
        _fail(
            "Error: No configuration file provided. "
            "Use --config option or 'geneannot init-config'"
        )

    try:
        pipeline = GeneAnnotationPipeline(cli_ctx.config, log_level=cli_ctx.log_level)

        click.echo("Starting gene annotation pipeline...", err=True)
        try:
            table = pipeline.run(output_file=output)
            failed = pipeline.get_failed_locations()
            execution_times = pipeline.get_execution_times()
        finally:
            pipeline.close()
    except Exception as e:
        _fail(f"Pipeline execution failed: {e}", cli_ctx)

    config = cli_ctx.config
    if not (output or config.output_file or config.output_dir):
        click.echo(write_gene_table(table), nl=False)

    click.echo(f"Annotated {len(table)} locations", err=True)
    click.echo(
        f"Total execution time: {execution_times.get('total', 0):.2f} seconds",
        err=True,
    )

    if failed:
        click.echo(f"{len(failed)} locations failed to annotate:", err=True)
        for result in failed:
            click.echo(f"  ✗ {result.location}: {result.error}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
