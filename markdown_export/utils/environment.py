"""
Process environment helpers
"""

import os
from contextlib import contextmanager
from typing import Iterator, Mapping, Optional


@contextmanager
def scoped_environ(values: Mapping[str, Optional[str]]) -> Iterator[None]:
    """Set environment variables for the duration of a block

    Entries whose value is empty are left untouched. Previous values are
    restored (or removed) on exit.
    """
    applied = {key: value for key, value in values.items() if value}
    saved = {key: os.environ.get(key) for key in applied}
    os.environ.update(applied)
    try:
        yield
    finally:
        for key, previous in saved.items():
            if previous is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = previous


def proxy_environ(proxy: Optional[str]) -> dict[str, Optional[str]]:
    """Proxy variables understood by the Playwright downloader"""
    return {"HTTPS_PROXY": proxy, "HTTP_PROXY": proxy}
