"""Various utility functions for determining the client address of a request."""

from collections.abc import Mapping


def split_host_port(host_port: str) -> tuple[str, str]:
    """
    Split a network address of the form 'host:port', '[host]:port' or '[host%zone]:port' into host and port.

    A literal IPv6 host must be enclosed in square brackets. The port may be empty.

    Raises
    ------
    ValueError
        If the address has no port, has too many colons outside of brackets or has misplaced brackets.
    """
    last_colon_index = host_port.rfind(":")
    if last_colon_index == -1:
        raise ValueError(f"Missing port in address '{host_port}'.")

    # Positions past which no further brackets are allowed
    open_bracket_search_start = 0
    close_bracket_search_start = 0
    if host_port.startswith("["):
        closing_bracket_index = host_port.find("]")
        if closing_bracket_index == -1:
            raise ValueError(f"Missing ']' in address '{host_port}'.")

        if closing_bracket_index + 1 == len(host_port):
            raise ValueError(f"Missing port in address '{host_port}'.")
        if closing_bracket_index + 1 != last_colon_index:
            if host_port[closing_bracket_index + 1] == ":":
                raise ValueError(f"Too many colons in address '{host_port}'.")
            raise ValueError(f"Missing port in address '{host_port}'.")

        host = host_port[1:closing_bracket_index]
        open_bracket_search_start = 1
        close_bracket_search_start = closing_bracket_index + 1
    else:
        host = host_port[:last_colon_index]
        if ":" in host:
            raise ValueError(f"Too many colons in address '{host_port}'.")

    if "[" in host_port[open_bracket_search_start:]:
        raise ValueError(f"Unexpected '[' in address '{host_port}'.")
    if "]" in host_port[close_bracket_search_start:]:
        raise ValueError(f"Unexpected ']' in address '{host_port}'.")

    port = host_port[last_colon_index + 1 :]

    return host, port


def resolve_client_host(remote_address: str, normalized_headers: Mapping[str, str]) -> str:
    """
    Determine the effective client host of a request.

    The connection-level remote address is used unless the request passed through a reverse proxy that set the
    'X-Forwarded-For' header, in which case the left-most entry of that header (the original client) takes precedence.
    The forwarded value is passed through as-is; it is not validated as an IP address.

    If the remote address cannot be split into host and port, the raw remote address is used as the host.

    Parameters
    ----------
    remote_address : str
        The 'host:port' address of the connection, as logged.
    normalized_headers : mapping of strings to strings
        The lowercase-keyed, single-valued view of the request headers.

    Returns
    -------
    client_host : str
        The resolved client host.
    """
    try:
        client_host, _ = split_host_port(remote_address)
    except ValueError:
        client_host = remote_address

    forwarded_for = normalized_headers.get("x-forwarded-for", "")
    if forwarded_for != "":
        client_host = forwarded_for.split(",", 1)[0].strip()

    return client_host
