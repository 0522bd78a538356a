"""Target address canonicalization

Every target address stored for a shortcode goes through `canonicalize()`
first, so that equivalent spellings of the same address collapse to a
single canonical form.

Canonical form:
    - scheme and host are lower-cased (the path keeps its case)
    - default ports are dropped (http:80, https:443)
    - trailing path separators are stripped, except for the root path
    - an empty path becomes the root path '/'
    - tracking query parameters (utm_*, fbclid, gclid, ref, ref_src) are
      removed; every other parameter keeps its original spelling and order
    - userinfo and fragment are preserved

Functions:
    canonicalize(raw: str, tracking_params: frozenset[str] = TRACKING_PARAMS) -> str
        Normalize an address or raise InvalidAddressError.

Example:
    >>> from linkresolver.utils.canonicalizer import canonicalize
    >>> canonicalize('https://Example.com/path/')
    'https://example.com/path'
    >>> canonicalize('https://example.com?utm_source=x&id=5')
    'https://example.com/?id=5'
"""

from urllib.parse import urlsplit, urlunsplit, unquote_plus

from linkresolver.exceptions import InvalidAddressError


TRACKING_PARAMS = frozenset(
    {
        'utm_source',
        'utm_medium',
        'utm_campaign',
        'utm_term',
        'utm_content',
        'fbclid',
        'gclid',
        'ref',
        'ref_src',
    }
)

DEFAULT_PORTS = {
    'http': 80,
    'https': 443,
}


def canonicalize(raw: str, tracking_params: frozenset[str] = TRACKING_PARAMS) -> str:
    """Normalize a raw target address into its canonical form

    The function is pure and idempotent:
    `canonicalize(canonicalize(x)) == canonicalize(x)` for every valid `x`.

    Args:
        raw (str):
            Address as provided by the client.

        tracking_params (frozenset[str]):
            Lower-cased query parameter names to strip.
            Defaults to TRACKING_PARAMS.

    Returns:
        str: canonical address.

    Raises:
        InvalidAddressError:
            If `raw` is not a string or lacks a scheme or host, or if it
            is syntactically malformed (e.g. bad port, broken IPv6 literal).
    """
    if not isinstance(raw, str):
        raise InvalidAddressError(f'Address must be of type string (given type: {type(raw)}).')

    address = raw.strip()
    try:
        parts = urlsplit(address)
        hostname = parts.hostname
        port = parts.port
    except ValueError as e:
        raise InvalidAddressError(f'Malformed address: {raw!r}.') from e

    if not parts.scheme or not hostname:
        raise InvalidAddressError(f'Address must include a scheme and a host (given value: {raw!r}).')
    if any(ch.isspace() for ch in address):
        raise InvalidAddressError(f'Address must not contain whitespace (given value: {raw!r}).')

    netloc = _canonical_netloc(parts.scheme, parts.netloc, hostname, port)
    path = _canonical_path(parts.path)
    query = _strip_tracking_params(parts.query, tracking_params)

    return urlunsplit((parts.scheme, netloc, path, query, parts.fragment))


def _canonical_netloc(scheme: str, netloc: str, hostname: str, port: int | None) -> str:
    userinfo, _, _ = netloc.rpartition('@')

    # urlsplit() lower-cases the hostname and drops the brackets of IPv6 literals
    host = f'[{hostname}]' if ':' in hostname else hostname
    if port is not None and DEFAULT_PORTS.get(scheme) != port:
        host = f'{host}:{port}'

    return f'{userinfo}@{host}' if userinfo else host


def _canonical_path(path: str) -> str:
    # NOTE: all trailing separators are stripped (not just one) so that
    #       '/a//' and '/a/' both land on '/a' in a single pass
    stripped = path.rstrip('/')
    return stripped if stripped else '/'


def _strip_tracking_params(query: str, tracking_params: frozenset[str]) -> str:
    # Parameters are compared by decoded, lower-cased name but kept verbatim
    # so that the encoding of retained parameters never changes.
    kept = []
    for param in query.split('&'):
        if not param:
            continue
        name = unquote_plus(param.partition('=')[0]).lower()
        if name not in tracking_params:
            kept.append(param)
    return '&'.join(kept)
