"""Click application entrypoint for blastoff."""

from __future__ import annotations

import logging
import signal
import sys
from pathlib import Path
from types import FrameType
from typing import Optional

import click

from blastoff import __version__
from blastoff.cli.exit_codes import (
    EXIT_SUCCESS,
    EXIT_ERROR,
    EXIT_USAGE,
    EXIT_SIGINT,
    EXIT_SIGTERM,
)
from blastoff.config import FETCHER_CHOICES, Config, load_config
from blastoff.exceptions import BlastoffError
from blastoff.utils.logging import get_logger, level_from_verbosity, setup_logging


def _handle_signal(signum: int, frame: Optional[FrameType]) -> None:
    """Handle interrupt signals for graceful shutdown."""
    sig_name = "SIGINT" if signum == signal.SIGINT else "SIGTERM"
    click.echo(f"\n{sig_name} received, shutting down...", err=True)
    raise KeyboardInterrupt(sig_name)


def _print_version(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
    if value and not ctx.resilient_parsing:
        click.echo(f"blastoff {__version__}")
        ctx.exit()


@click.group(context_settings=dict(help_option_names=["-h", "--help"]))
@click.option(
    "-V",
    "--version",
    is_flag=True,
    is_eager=True,
    expose_value=False,
    callback=_print_version,
    help="Show the version and exit.",
)
def cli() -> None:
    """blastoff: assembly accuracy from simulated mate pairs.

    Pairs of 100 bp fragments are cut from a known REFERENCE at doubling
    separations, aligned to an ASSEMBLY, and the fraction that land on the
    same contig at the expected distance is reported per separation.
    """


def build_config(
    reference: Path,
    assembly: Path,
    config_path: Optional[Path],
    **overrides,
) -> Config:
    """Merge the optional YAML config with command line overrides."""
    cfg = load_config(config_path) if config_path else Config()
    cfg.reference = reference
    cfg.assembly = assembly

    simulation_keys = {
        "min_distance": "min_separation",
        "max_distance": "max_separation",
        "reads": "reads",
        "seed": "seed",
        "fetcher": "fetcher",
    }
    for option, attr in simulation_keys.items():
        value = overrides.get(option)
        if value is not None:
            setattr(cfg.simulation, attr, value)

    if overrides.get("save_alignments"):
        cfg.alignment.save_alignments = True
    if overrides.get("csv"):
        cfg.runtime.csv = True
    if overrides.get("work_dir") is not None:
        cfg.runtime.work_dir = overrides["work_dir"]
    if overrides.get("log_file") is not None:
        cfg.runtime.log_file = overrides["log_file"]
    return cfg


@cli.command()
@click.argument("reference", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("assembly", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-m", "--min-distance", type=int, default=None, help="Minimum read distance [default: 100]")
@click.option("-n", "--max-distance", type=int, default=None, help="Maximum read distance [default: 102400]")
@click.option("-r", "--reads", type=int, default=None, help="Read pairs per distance [default: 1000]")
@click.option("-s", "--seed", type=int, default=None, help="Random seed, 1-9 [default: 1]")
@click.option("-c", "--csv", is_flag=True, help="Record concordant counts in an accumulating CSV file")
@click.option("-o", "--save-alignments", is_flag=True, help="Keep aligner output and reuse it on later runs")
@click.option(
    "--fetcher",
    type=click.Choice(FETCHER_CHOICES),
    default=None,
    help="How fragment bases are read from the reference [default: xdget]",
)
@click.option(
    "-w",
    "--work-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory for fragment, alignment and CSV files [default: .]",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Configuration file (YAML)",
)
@click.option("-v", "--verbose", count=True, help="Increase log verbosity (-v for INFO, -vv for DEBUG)")
@click.option("--log-file", type=click.Path(path_type=Path), help="Path for log file output")
def run(
    reference: Path,
    assembly: Path,
    min_distance: Optional[int],
    max_distance: Optional[int],
    reads: Optional[int],
    seed: Optional[int],
    csv: bool,
    save_alignments: bool,
    fetcher: Optional[str],
    work_dir: Optional[Path],
    config_path: Optional[Path],
    verbose: int,
    log_file: Optional[Path],
) -> None:
    """Evaluate ASSEMBLY against the known REFERENCE genome.

    Prints one line per separation: the separation and the fraction of
    pairs placed concordantly (4 decimals).
    """
    # Imported here so `--help` stays fast
    from blastoff.core.pipeline import EvaluationPipeline

    try:
        cfg = build_config(
            reference,
            assembly,
            config_path,
            min_distance=min_distance,
            max_distance=max_distance,
            reads=reads,
            seed=seed,
            csv=csv,
            save_alignments=save_alignments,
            fetcher=fetcher,
            work_dir=work_dir,
            log_file=log_file,
        )
        cfg.validate()
    except BlastoffError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(EXIT_USAGE)

    if verbose:
        log_level = level_from_verbosity(verbose)
    else:
        log_level = logging.getLevelName(cfg.runtime.log_level.upper())
    setup_logging(level=log_level, log_file=cfg.runtime.log_file)
    logger = get_logger("cli")
    logger.debug(f"Effective configuration: {cfg.to_dict()}")

    try:
        EvaluationPipeline(cfg).run()
    except KeyboardInterrupt as exc:
        logger.info("Run interrupted by user")
        sys.exit(EXIT_SIGTERM if str(exc) == "SIGTERM" else EXIT_SIGINT)
    except BlastoffError as exc:
        logger.error(f"Pipeline error: {exc}")
        sys.exit(EXIT_ERROR)
    except Exception as exc:
        logger.exception(f"Unexpected error: {exc}")
        sys.exit(EXIT_ERROR)


@cli.command(name="init-config")
@click.option(
    "--output-file",
    type=click.Path(path_type=Path),
    default=Path("blastoff.yaml"),
    help="Output configuration file path",
)
@click.option(
    "--stdout",
    is_flag=True,
    help="Print default config YAML to stdout instead of writing a file",
)
def init_config(output_file: Path, stdout: bool) -> None:
    """Generate a template configuration file."""
    from blastoff.resources import get_default_config

    config_text = get_default_config()
    if stdout:
        click.echo(config_text)
    else:
        output_file.write_text(config_text)
        click.echo(f"Configuration template saved to: {output_file}")


def main(argv: list[str] | None = None) -> int:
    """Main entry point with signal handling."""
    signal.signal(signal.SIGINT, _handle_signal)
    signal.signal(signal.SIGTERM, _handle_signal)

    try:
        cli(argv)
        return EXIT_SUCCESS
    except KeyboardInterrupt:
        return EXIT_SIGINT
    except SystemExit as exc:
        # Preserve explicit exit codes from cli()
        if exc.code is None:
            return EXIT_SUCCESS
        return exc.code if isinstance(exc.code, int) else EXIT_ERROR
    except Exception as exc:
        click.echo(f"Error: {exc}", err=True)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
