"""Prefix-based inclusion and exclusion rules applied to each log record."""

from pydantic import BaseModel, ConfigDict, Field


class LogFilterConfig(BaseModel):
    """
    Prefix rules deciding which records reach the output.

    An empty string disables the corresponding rule. All comparisons are case-sensitive and anchored at the start
    of the field.
    """

    model_config = ConfigDict(frozen=True)

    include_hosts: str = Field(default="", description="Only include hosts having this prefix.")
    exclude_client: str = Field(default="", description="Ignore clients having this prefix.")
    exclude_urls: str = Field(default="", description="Ignore URLs having this prefix.")


def is_record_included(*, host: str, uri: str, client_host: str, filter_config: LogFilterConfig) -> bool:
    """
    Evaluate the filter rules against a single record.

    The rules are checked in a fixed order and the first one to match rejects the record:

    1. the host does not start with the included host prefix
    2. the URI starts with the excluded URL prefix
    3. the resolved client host starts with the excluded client prefix
    """
    if filter_config.include_hosts != "" and not host.startswith(filter_config.include_hosts):
        return False

    if filter_config.exclude_urls != "" and uri.startswith(filter_config.exclude_urls):
        return False

    if filter_config.exclude_client != "" and client_host.startswith(filter_config.exclude_client):
        return False

    return True
