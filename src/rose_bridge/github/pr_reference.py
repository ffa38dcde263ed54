"""Parse GitHub pull-request URLs into owner/repo/number references."""

import re

from rose_bridge.models.events import PrReference

# Prefix match: trailing path segments or a query string are allowed.
# PR numbers longer than 20 digits are rejected, not truncated.
_PR_URL_RE = re.compile(r"^https?://github\.com/([^/]+)/([^/]+)/pull/(\d{1,20})(?!\d)", re.ASCII)


def parse_pr_url(url: object) -> PrReference | None:
    """Return the ``PrReference`` for ``https://github.com/{owner}/{repo}/pull/{n}``, else None."""
    if not isinstance(url, str):
        return None

    match = _PR_URL_RE.match(url)
    if not match:
        return None

    owner, repo, number = match.group(1), match.group(2), int(match.group(3))
    if number <= 0:
        return None
    return PrReference(owner=owner, repo=repo, number=number)
