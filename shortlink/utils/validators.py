import re

# IPv4 octets are not range checked: 999.999.999.999 is accepted.
# \S is Unicode-aware, so non-ASCII whitespace such as U+00A0 ends a match.
_URL_PATTERN = re.compile(
    r"^https?://"
    r"(?:"
    r"(?:[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?\.)+[A-Za-z]{2,6}\.?"
    r"|localhost"
    r"|[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}"
    r")"
    r"(?::[0-9]+)?"
    r"(?:/?|[/?]\S+)$"
)


def is_valid_url(candidate) -> bool:
    """Return True for well-formed http(s) URLs with a hostname, localhost or IPv4 host."""
    if not isinstance(candidate, str):
        return False
    return _URL_PATTERN.fullmatch(candidate) is not None
