import logging
from pathlib import Path

import click

from .config import ConfigurationError, HarnessConfig, OutputMode, UnionRewriteConfig, load_config
from .harness import HarnessError, HarnessRunner, render_report
from .schema_ast import SchemaLoadError, dump_schema, load_schema_file
from .schema_ast.parser import YAML_SUFFIXES
from .unions import add_union_one_of_constraints
from .writer import AtomicWriter, SchemaWriteError


@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging")
def json_schema_unions(verbose):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@json_schema_unions.command()
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True))
@click.option("--discriminator", "-d", "discriminators", multiple=True, help="Union discriminator field name")
@click.option("--skip-field", "-s", "skip_fields", multiple=True, help="Union member to exclude and remove")
@click.option(
    "--keep-discriminators",
    is_flag=True,
    default=False,
    help="Keep discriminator properties, with their enum trimmed to the remaining members",
)
@click.option("--force", "-f", is_flag=True, default=False, help="Overwrite the output file if it exists")
@click.argument("path", type=click.Path(exists=True, resolve_path=True))
@click.argument("output", type=click.Path(resolve_path=True))
def rewrite(config, discriminators, skip_fields, keep_discriminators, force, path, output):
    """Add oneOf constraints for the discriminated unions of a schema."""
    try:
        if config is not None:
            config = load_config(config, UnionRewriteConfig)
        else:
            config = UnionRewriteConfig()

        # CLI flags extend or override the config file
        if discriminators:
            config.discriminators = list(config.discriminators) + list(discriminators)
        if skip_fields:
            config.fields_to_skip = list(config.fields_to_skip) + list(skip_fields)
        if keep_discriminators:
            config.remove_discriminators = False
        if force:
            config.output_mode = OutputMode.FORCE

        if not config.discriminators:
            raise click.UsageError("At least one discriminator is required (--discriminator or config file)")

        schema = load_schema_file(path)
        add_union_one_of_constraints(
            schema,
            config.discriminator_fields(),
            config.remove_discriminators,
            config.fields_to_skip,
        )

        output = Path(output)
        fmt = "yaml" if output.suffix in YAML_SUFFIXES else "json"
        content = dump_schema(schema, fmt, config.indent)

        writer = AtomicWriter()
        if config.output_mode == OutputMode.FORCE:
            writer.write(output, content, fmt)
        else:
            writer.write_if_not_exists(output, content, fmt)
    except (ConfigurationError, SchemaLoadError, SchemaWriteError, FileExistsError) as e:
        raise click.ClickException(str(e)) from e


@json_schema_unions.command()
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True))
@click.option("--schema-root", default=None, type=click.Path(exists=True, file_okay=False, resolve_path=True))
@click.option("--snippet-root", default=None, type=click.Path(exists=True, file_okay=False, resolve_path=True))
@click.option("--work-dir", default=None, type=click.Path(file_okay=False, resolve_path=True))
@click.argument("tests_dir", required=False, default=None, type=click.Path(exists=True, file_okay=False, resolve_path=True))
def check(config, schema_root, snippet_root, work_dir, tests_dir):
    """Validate the documents of the test suites found in TESTS_DIR."""
    try:
        if config is not None:
            config = load_config(config, HarnessConfig)
        else:
            config = HarnessConfig()

        if tests_dir is not None:
            config.tests_dir = Path(tests_dir)
        if schema_root is not None:
            config.schema_root = Path(schema_root)
        if snippet_root is not None:
            config.snippet_root = Path(snippet_root)
        if work_dir is not None:
            config.work_dir = Path(work_dir)

        result = HarnessRunner(config).run()
    except (ConfigurationError, HarnessError) as e:
        raise click.ClickException(str(e)) from e

    click.echo(render_report(result))
    if not result.succeeded:
        raise SystemExit(1)
