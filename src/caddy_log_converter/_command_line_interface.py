"""Call the Caddy log converter from the command line."""

import importlib.metadata
import sys

import click

from ._caddy_log_file_converter import CaddyLogFileConversionError, convert_caddy_log_files
from ._error_collection import _collect_error
from ._globals import GOACCESS_LOG_FORMAT
from ._log_filter import LogFilterConfig


@click.command(name="caddy_log_converter")
@click.argument(
    "caddy_log_file_paths",
    nargs=-1,
    type=click.Path(dir_okay=False),
)
@click.option(
    "--print-log-format",
    "--print_log_format",
    "print_log_format",
    help="Print the log-format to use in GoAccess and exit.",
    is_flag=True,
    default=False,
)
@click.option(
    "--include-hosts",
    "--include_hosts",
    "include_hosts",
    help="Only include hosts having this prefix.",
    required=False,
    type=str,
    default="",
)
@click.option(
    "--exclude-client",
    "--exclude_client",
    "exclude_client",
    help="Ignore clients having this prefix.",
    required=False,
    type=str,
    default="",
)
@click.option(
    "--exclude-urls",
    "--exclude_urls",
    "exclude_urls",
    help="Ignore URLs having this prefix.",
    required=False,
    type=str,
    default="",
)
@click.option(
    "--show-progress-bar",
    "--show_progress_bar",
    "show_progress_bar",
    help="Display a progress bar over the input files on standard error.",
    is_flag=True,
    default=False,
)
def _convert_caddy_log_files_cli(
    caddy_log_file_paths: tuple[str, ...],
    print_log_format: bool,
    include_hosts: str,
    exclude_client: str,
    exclude_urls: str,
    show_progress_bar: bool,
) -> None:
    """Convert Caddy JSON access logs (plain or .gz) into tab-separated lines for GoAccess."""
    if print_log_format is True:
        click.echo(GOACCESS_LOG_FORMAT)
        return None

    filter_config = LogFilterConfig(
        include_hosts=include_hosts,
        exclude_client=exclude_client,
        exclude_urls=exclude_urls,
    )

    try:
        convert_caddy_log_files(
            caddy_log_file_paths=caddy_log_file_paths,
            filter_config=filter_config,
            file_tqdm_kwargs=dict(disable=not show_progress_bar),
        )
    except CaddyLogFileConversionError as error:
        click.echo(f"Could not process {error.caddy_log_file_path}: {error.__cause__}", err=True)

        # Recording is best effort once the failure has been reported
        try:
            _collect_error(exception=error.__cause__, error_type="conversion", source=error.caddy_log_file_path)
        except (OSError, importlib.metadata.PackageNotFoundError) as collection_exception:
            click.echo(f"Could not record the error: {collection_exception}", err=True)

        sys.exit(1)

    return None
