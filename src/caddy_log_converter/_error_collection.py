import datetime
import importlib.metadata
import pathlib
import traceback

from ._config import get_base_folder_path


def _collect_error(*, exception: BaseException, error_type: str, source: str | pathlib.Path | None = None) -> pathlib.Path:
    """
    Append a failure, with its full traceback, to a dated text file for later review.

    Parameters
    ----------
    exception : BaseException
        The error that stopped processing.
    error_type : str
        Added as an identifying tag on the error collection file name, such as "conversion".
    source : str or pathlib.Path, optional
        The input source being processed when the error occurred.

    Returns
    -------
    error_collection_file_path : pathlib.Path
        The file the error was appended to.
    """
    errors_folder_path = get_base_folder_path() / "errors"
    errors_folder_path.mkdir(exist_ok=True)

    version = importlib.metadata.version(distribution_name="caddy_log_converter")
    date = datetime.datetime.now().strftime("%y%m%d")
    error_collection_file_path = errors_folder_path / f"v{version}_{date}_{error_type}_errors.txt"

    message = f"Could not process {source}!\n\n" if source is not None else ""
    message += f"{type(exception)}: {exception}\n\n"
    message += "".join(traceback.format_exception(exception))

    with open(file=error_collection_file_path, mode="a") as io:
        io.write(f"{message}\n\n")

    return error_collection_file_path
