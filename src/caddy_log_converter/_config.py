import os
import pathlib

CADDY_LOG_CONVERTER_BASE_FOLDER_PATH = pathlib.Path(
    os.environ.get("CADDY_LOG_CONVERTER_BASE_FOLDER_PATH", pathlib.Path.home() / ".caddy_log_converter")
)

PROGRESS_REPORT_INTERVAL = 1_000


def get_base_folder_path() -> pathlib.Path:
    """Resolve the folder used for error collection, honoring the environment variable at call time."""
    base_folder_path = pathlib.Path(
        os.environ.get("CADDY_LOG_CONVERTER_BASE_FOLDER_PATH", CADDY_LOG_CONVERTER_BASE_FOLDER_PATH)
    )
    base_folder_path.mkdir(parents=True, exist_ok=True)

    return base_folder_path
