"""Helpers for collapsing multi-valued HTTP header maps into single-valued lookups."""

from collections.abc import Mapping, Sequence


def normalize_headers(headers: Mapping[str, Sequence[str] | str] | None) -> dict[str, str]:
    """
    Collapse a header map into a lookup from lowercased header name to its first value.

    Header names are received with the casing the client or upstream sent, and each name may carry several values.
    The normalized view keeps only the first value of each header; names whose value sequence is empty contribute
    nothing.

    If two differently-cased names collapse onto the same lowercased key (e.g. 'X-Test' and 'x-test'), the name
    visited last in the mapping's iteration order wins. Decoded JSON objects iterate in document order, so this is the
    one appearing last in the log record. Callers should not rely on which casing wins.

    A mapping that is already normalized (lowercase names, one string per name) is returned unchanged, so applying
    this function twice gives the same result as applying it once.

    Parameters
    ----------
    headers : mapping of strings to sequences of strings, optional
        The raw header map. The mapping itself is never modified.

    Returns
    -------
    normalized_headers : dict of strings to strings
        The single-valued, lowercase-keyed view.
    """
    normalized_headers = dict()
    if not headers:
        return normalized_headers

    for name, values in headers.items():
        if isinstance(values, str):
            normalized_headers[name.lower()] = values
            continue
        if not values:
            continue

        normalized_headers[name.lower()] = values[0]

    return normalized_headers
