"""
Command Line Interface for dnstaplog
"""

import cProfile
import io
import sys
from typing import Optional

import click

from .config import ConfigManager
from .constants import LOG_LEVELS
from .exceptions import DnstapLogError, IOFailure
from .reader import TapReader
from .utils.common import ensure_parent, format_bytes
from .utils.logger import setup_logger, get_logger, log_system_info
from .utils import print_info, print_error, Colors


@click.group()
@click.option('--config', '-c', type=click.Path(exists=True, dir_okay=False),
              help='Configuration file path')
@click.option('--log-level', '-l', type=click.Choice(list(LOG_LEVELS), case_sensitive=False),
              help='Log level for diagnostics on stderr')
@click.option('--log-file', type=click.Path(dir_okay=False), help='Log file path')
@click.pass_context
def cli(ctx, config: Optional[str], log_level: Optional[str], log_file: Optional[str]):
    """dnstaplog - print dnstap captures as a DNS audit log"""
    ctx.ensure_object(dict)

    try:
        config_manager = ConfigManager(config)
    except ValueError as e:
        print_error(f"Failed to load configuration: {e}")
        sys.exit(1)

    tap_config = config_manager.get_config()
    # command line overrides the configuration file
    if log_level:
        tap_config.log_level = log_level.upper()
    if log_file:
        tap_config.log_file = log_file

    setup_logger(level=tap_config.log_level, log_file=tap_config.log_file)

    ctx.obj['config_manager'] = config_manager
    ctx.obj['config'] = tap_config
    ctx.obj['logger'] = get_logger(__name__)


def _open_sink():
    """UTF-8 text writer over stdout, buffered until the run is flushed"""
    return io.TextIOWrapper(sys.stdout.buffer, encoding='utf-8', newline='')


def _run_reader(reader: TapReader, dnstap_file: str, config) -> None:
    sink = _open_sink()
    try:
        reader.read_file(dnstap_file, sink, config.reader)
    finally:
        try:
            sink.flush()
        except OSError as e:
            raise IOFailure(f"unable to flush output: {e}") from e
        finally:
            sink.detach()


def _run_profiled(reader: TapReader, dnstap_file: str, config) -> None:
    profile_path = ensure_parent(config.cpuprofile)
    try:
        # create the profile file up front so a bad path fails before reading
        open(profile_path, 'wb').close()
    except OSError as e:
        raise IOFailure(f"unable to create CPU profile {profile_path}: {e}") from e

    profiler = cProfile.Profile()
    profiler.enable()
    try:
        _run_reader(reader, dnstap_file, config)
    finally:
        profiler.disable()
        try:
            profiler.dump_stats(str(profile_path))
        except OSError as e:
            raise IOFailure(f"unable to write CPU profile {profile_path}: {e}") from e


@cli.command()
@click.option('--file', '-f', 'dnstap_file', type=click.Path(dir_okay=False),
              help='Read dnstap data from file')
@click.option('--id', 'print_id', is_flag=True, help='Include DNS ID in output')
@click.option('--cpuprofile', type=click.Path(dir_okay=False), help='Write CPU profile to file')
@click.option('--max-frame-size', type=click.IntRange(min=1), help='Largest accepted frame in bytes')
@click.option('--content-type', help='Required Frame Streams content type')
@click.pass_context
def read(ctx, dnstap_file: Optional[str], print_id: bool, cpuprofile: Optional[str],
         max_frame_size: Optional[int], content_type: Optional[str]):
    """Print one line per dnstap frame"""
    config = ctx.obj['config']
    logger = ctx.obj['logger']

    if not dnstap_file:
        click.echo(ctx.get_help(), err=True)
        ctx.exit(1)

    # Override config with command line options
    if print_id:
        config.output.print_id = True
    if cpuprofile:
        config.cpuprofile = cpuprofile
    if max_frame_size:
        config.reader.max_frame_size = max_frame_size
    if content_type:
        config.reader.content_type = content_type

    log_system_info(logger)

    reader = TapReader(config.output.to_options())
    try:
        if config.cpuprofile:
            _run_profiled(reader, dnstap_file, config)
        else:
            _run_reader(reader, dnstap_file, config)
    except KeyboardInterrupt:
        print_info("Reading stopped by user")
        sys.exit(1)
    except DnstapLogError as e:
        print_error(str(e))
        logger.debug("Reading failed", exc_info=True)
        sys.exit(1)

    stats = reader.get_stats()
    logger.debug(
        f"Processed {stats['frames']} frames ({format_bytes(stats['bytes'])}) in "
        f"{stats['duration']:.3f}s, {stats['parse_errors']} unparseable DNS messages"
    )


@cli.command()
@click.option('--output', '-o', type=click.Path(dir_okay=False),
              default='dnstaplog_config.yaml',
              help='Output configuration file path')
@click.pass_context
def generate_config(ctx, output: str):
    """Generate sample configuration file"""
    config_manager = ctx.obj['config_manager']

    try:
        config_manager.save_to_file(output)
        print_info(f"Configuration file generated: {output}")
    except OSError as e:
        print_error(f"Failed to generate configuration: {e}")
        sys.exit(1)


@cli.command()
def version():
    """Show version information"""
    from . import __version__
    click.echo(f"{Colors.BOLD}dnstaplog{Colors.RESET} version {Colors.GREEN}{__version__}{Colors.RESET}",
               color=sys.stdout.isatty())


def main():
    """Main entry point"""
    cli()


if __name__ == '__main__':
    main()
