"""CLI interface for the tonal values comparison sheet"""

import sys

import click

from tonalvalues.pipeline.config import Config, QUANTIZATION_METHODS, get_config
from tonalvalues.pipeline.orchestrator import TonalValuesPipeline
from tonalvalues.staircase.quantizer import Staircase
from tonalvalues.utils.error_handler import ArgumentCountError, EmptyPathError, TonalValuesError
from tonalvalues.utils.logger import setup_logging, get_logger

logger = get_logger(__name__)


def _load_config(config_path):
    return Config(config_path) if config_path else get_config()


@click.group()
@click.option('--config', type=click.Path(exists=True, dir_okay=False), help='Path to config file')
@click.option('--verbose', is_flag=True, help='Enable verbose logging')
@click.pass_context
def cli(ctx, config, verbose):
    """Study how reducing an image to a few tones changes perceived detail"""
    ctx.ensure_object(dict)
    try:
        ctx.obj['config'] = _load_config(config)
    except TonalValuesError as e:
        raise click.UsageError(str(e))

    logging_config = ctx.obj['config'].get_logging_config()
    log_level = "DEBUG" if verbose else logging_config.get("level", "INFO")
    setup_logging(
        log_level=log_level,
        log_format=logging_config.get("format", "console"),
        log_file=logging_config.get("file")
    )


@cli.command()
@click.argument('image_paths', nargs=-1)
@click.option('--output', '-o', type=click.Path(dir_okay=False), help='Where to write the sheet (default from config)')
@click.option('--tones', '-n', type=click.IntRange(min=0), multiple=True, help='Tone count for a row, repeatable')
@click.option('--method', type=click.Choice(QUANTIZATION_METHODS), help='Quantization method')
@click.pass_context
def render(ctx, image_paths, output, tones, method):
    """Render the comparison sheet for one JPEG photograph"""
    try:
        if len(image_paths) != 1:
            raise ArgumentCountError(want=1, got=len(image_paths))
        image_path = image_paths[0]
        if image_path == "":
            raise EmptyPathError()

        pipeline = TonalValuesPipeline(config=ctx.obj['config'])
        sheet, metadata = pipeline.process_image(
            image_path,
            output_path=output,
            tones=list(tones) or None,
            method=method
        )

        low, high = metadata["value_range"]
        click.echo(f"min luminance {low}, max luminance {high}")
        click.echo(f"✓ Sheet saved to: {metadata['output_path']}")

    except TonalValuesError as e:
        logger.error("render_failed", error=str(e))
        click.echo(f"✗ Render failed: {str(e)}", err=True)
        sys.exit(1)


@cli.command()
@click.argument('n', type=click.IntRange(min=0))
@click.option('--min', 'min_value', type=click.IntRange(0, 255), default=0, show_default=True, help='Darkest luminance')
@click.option('--max', 'max_value', type=click.IntRange(0, 255), default=255, show_default=True, help='Brightest luminance')
def levels(n, min_value, max_value):
    """Print which tone every luminance value maps to"""
    try:
        staircase = Staircase(min_value, max_value, n)
    except TonalValuesError as e:
        click.echo(f"✗ {str(e)}", err=True)
        sys.exit(1)

    click.echo(str(staircase))
    start = min_value
    for value in range(min_value, max_value + 1):
        tone = staircase.transform(value)
        if value == max_value or staircase.transform(value + 1) != tone:
            click.echo(f"{start:3d}-{value:3d} -> {tone}")
            start = value + 1


def main():
    cli(obj={})


if __name__ == '__main__':
    main()
