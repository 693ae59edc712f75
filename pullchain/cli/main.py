"""
pullchain CLI - run pipelines over numbers from the command line

Usage:
    pullchain run <pipeline> [values...] [options]
    pullchain demo
"""

import sys
import time
import warnings
from typing import List, Optional, Tuple, Union

try:
    import click

    CLICK_AVAILABLE = True
except ImportError:
    CLICK_AVAILABLE = False
    click = None

from pullchain import __version__
from pullchain.cli.formatters import FORMATTERS, get_formatter
from pullchain.core.builder import build_pipeline

DEMO_PIPELINE = (
    "select x + 1 | select x * x | select x - 10 | where x > 5 | take 5"
    " | order by desc | take 2 | order by asc"
)
DEMO_VALUES = list(range(1, 11))

Number = Union[int, float]


def parse_values(tokens: List[str]) -> List[Number]:
    """
    Convert text tokens into numbers

    Integers stay integers, anything with a '.' or exponent becomes a float.
    Tokens that are not numbers are skipped with a warning.

    Args:
        tokens: Whitespace-separated tokens

    Returns:
        Parsed numbers, in input order
    """
    values = []
    for position, token in enumerate(tokens, start=1):
        try:
            values.append(int(token))
            continue
        except ValueError:
            pass
        try:
            values.append(float(token))
        except ValueError:
            warnings.warn(f"Skipping non-numeric value {token!r} at position {position}", UserWarning)
    return values


def read_tokens(values: Tuple[str, ...], input_file: Optional[str]) -> List[str]:
    """
    Collect input tokens from arguments and/or an input file

    Args:
        values: Values given as command arguments
        input_file: Path to a whitespace-separated file, or '-' for stdin

    Returns:
        All tokens, file tokens after argument tokens
    """
    tokens = []
    for value in values:
        tokens.extend(value.replace(",", " ").split())

    if input_file == "-":
        tokens.extend(sys.stdin.read().replace(",", " ").split())
    elif input_file:
        with open(input_file) as f:
            tokens.extend(f.read().replace(",", " ").split())

    return tokens


def _tracer(message: str) -> None:
    click.echo(f"  {message}", err=True)


@click.group()
@click.version_option(version=__version__, prog_name="pullchain")
def cli():
    """
    pullchain - lazy pull-based pipelines

    Build a pipeline from text and run it over a list of numbers.
    """
    if not CLICK_AVAILABLE:
        print("CLI requires click library. Install with: pip install pullchain[cli]")
        sys.exit(1)


@cli.command()
@click.argument("pipeline", type=str)
@click.argument("values", type=str, nargs=-1)
@click.option(
    "--input",
    "-i",
    "input_file",
    type=click.Path(allow_dash=True),
    default=None,
    help="Read whitespace-separated values from file ('-' for stdin)",
)
@click.option(
    "--format",
    "-f",
    type=click.Choice(list(FORMATTERS), case_sensitive=False),
    default="table",
    help="Output format (default: table)",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(),
    default=None,
    help="Write output to file instead of stdout",
)
@click.option(
    "--no-color",
    is_flag=True,
    help="Disable colored output",
)
@click.option(
    "--explain",
    is_flag=True,
    help="Show the pipeline plan instead of results",
)
@click.option(
    "--trace",
    is_flag=True,
    help="Narrate every transform, predicate and comparison on stderr",
)
@click.option(
    "--time",
    "-t",
    "show_time",
    is_flag=True,
    help="Show execution time",
)
def run(
    pipeline: str,
    values: Tuple[str, ...],
    input_file: Optional[str],
    format: str,
    output: Optional[str],
    no_color: bool,
    explain: bool,
    trace: bool,
    show_time: bool,
):
    """
    Run PIPELINE over VALUES

    Examples:

        \b
        # Square and keep the first three
        $ pullchain run "select x * x | take 3" 1 2 3 4 5

        \b
        # Values from a file, JSON output
        $ pullchain run "where x % 2 == 0 | order by desc" -i numbers.txt -f json

        \b
        # Show the plan
        $ pullchain run "select x + 1 | take 2" --explain
    """
    fmt = format.lower()
    del format
    try:
        start_time = time.time()

        composer = build_pipeline(pipeline, tracer=_tracer if trace else None)

        if explain:
            click.echo(composer.explain())
            return

        inputs = parse_values(read_tokens(values, input_file))
        results = composer.materialize(inputs)

        formatter = get_formatter(fmt)
        output_text = formatter.format(
            results,
            no_color=no_color or (not sys.stdout.isatty()),
            show_footer=not output,
        )

        if show_time:
            elapsed = time.time() - start_time
            output_text += f"\nProcessed {len(inputs)} values in {elapsed:.3f}s"

        if output:
            with open(output, "w") as f:
                f.write(output_text)
            click.echo(f"Results written to {output} ({fmt} format)", err=True)
        else:
            click.echo(output_text)

    except FileNotFoundError as e:
        click.echo(f"Error: File not found - {e}", err=True)
        sys.exit(1)
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        if "--debug" in sys.argv:
            raise
        sys.exit(1)


@cli.command()
@click.option(
    "--quiet",
    "-q",
    is_flag=True,
    help="Only print the result, without narration",
)
def demo(quiet: bool):
    """
    Run the reference pipeline over 1..10 with narration

    \b
    select x + 1 | select x * x | select x - 10 | where x > 5 | take 5
      | order by desc | take 2 | order by asc
    """
    composer = build_pipeline(DEMO_PIPELINE, tracer=None if quiet else _tracer)
    results = composer.materialize(DEMO_VALUES)
    click.echo(" ".join(str(v) for v in results))


if __name__ == "__main__":
    cli()
