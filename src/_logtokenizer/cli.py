"""
Command line interface, ie.

    $ echo 'localhost bluetoothd[723]: Starting' | logtokenizer tokenize
    [PROGRAM_PID('bluetoothd', '723'), LITERAL('Starting')]

"""

import json
import sys

import click

from _logtokenizer.benchmark import SAMPLE_LINES, benchmark
from _logtokenizer.reading import open_lines
from _logtokenizer.tokenizer import UnparseableInputError, tokenize
from logtokenizer.version import version


def render(tokens, output_format):
    if output_format == "json":
        return json.dumps([t.as_tree() for t in tokens])
    return "[" + ", ".join(str(t) for t in tokens) + "]"


@click.group()
@click.version_option(version=version)
def cli():
    """logtokenizer - format agnostic tokenizer for log lines"""
    pass


@cli.command(name="tokenize")
@click.argument("input_file", type=click.File("r"), default="-")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["repr", "json"]),
    default="repr",
    help="How to print the tokens of each line (default: repr)",
)
@click.option(
    "--on-error",
    type=click.Choice(["report", "skip", "abort"]),
    default="report",
    help="What to do with lines that can not be tokenized (default: report)",
)
def tokenize_command(input_file, output_format, on_error):
    """
    Tokenize each line of INPUT_FILE (default: stdin) and print the tokens.
    """
    failed = False
    with open_lines(input_file) as lines:
        for line_number, line in enumerate(lines, start=1):
            try:
                tokens = tokenize(line)
            except UnparseableInputError as err:
                if on_error == "skip":
                    continue
                failed = True
                click.echo(f"line {line_number}: {err}", err=True)
                if on_error == "abort":
                    break
                continue
            click.echo(render(tokens, output_format))
    if failed:
        sys.exit(1)


@cli.command(name="bench")
@click.argument("input_file", type=click.File("r"), required=False)
@click.option("--number", "-n", type=click.IntRange(min=1), default=1000)
@click.option("--repeat", "-r", type=click.IntRange(min=1), default=5)
def bench_command(input_file, number, repeat):
    """
    Benchmark tokenize on sample log lines, or on the lines of INPUT_FILE.
    """
    lines = SAMPLE_LINES
    if input_file is not None:
        with open_lines(input_file) as file_lines:
            lines = {
                f"line {i}": line
                for i, line in enumerate(file_lines, start=1)
                if line.strip()
            }
    try:
        results = benchmark(lines, number=number, repeat=repeat)
    except UnparseableInputError as err:
        click.echo(f"Error: {err}", err=True)
        sys.exit(1)

    click.echo(
        f"{'line':<24} {'mean (us)':>10} {'median (us)':>12} "
        f"{'p95 (us)':>10} {'lines/s':>10}"
    )
    for result in results:
        click.echo(
            f"{result.name:<24} {result.mean * 1e6:>10.1f} "
            f"{result.median * 1e6:>12.1f} {result.p95 * 1e6:>10.1f} "
            f"{result.lines_per_second:>10.0f}"
        )
