"""Remote naming"""

import hashlib


def remote_name_for_url(url: str) -> str:
    """Local git remote name for a remote URL: the md5 hex digest of the URL

    Stable across runs, so repeated deploys reuse the remote entry.
    """
    return hashlib.md5(url.encode("utf-8")).hexdigest()
