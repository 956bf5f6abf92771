"""
credlify.licenses - License Text Lookup
=======================================

Fetches the full text of a license from the SPDX license list so the
generated LICENSE file is filled in. The license identifier comes from
the ``license`` field of package.json.

A failed lookup never stops scaffolding; it yields an empty string and
the caller prints a warning.
"""

from __future__ import annotations

import re

import httpx


LICENSE_TEXT_URL = "https://raw.githubusercontent.com/spdx/license-list-data/main/text/{license_id}.txt"

LICENSE_LIST_URL = "https://opensource.org/licenses/alphabetical"

DEFAULT_TIMEOUT = 10.0

# SPDX identifiers: letters, digits, periods, hyphens and plus signs
_SPDX_ID = re.compile(r"^[A-Za-z0-9.+-]+$")


async def fetch_license_text(
    license_id: str,
    client: httpx.AsyncClient | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> str:
    """
    Get the text of a license.

    Parameters
    ----------
    license_id : str
        SPDX license identifier, e.g. ``"MIT"``.

    client : httpx.AsyncClient | None
        Client to use. A short-lived client is created when omitted.

    timeout : float
        Request timeout in seconds for the created client.

    Returns
    -------
    str
        The license text, or an empty string if the identifier is not a
        plain SPDX id (expressions like ``"MIT OR Apache-2.0"`` included)
        or the text could not be fetched.
    """
    license_id = license_id.strip()
    if not license_id or not _SPDX_ID.match(license_id):
        return ""

    url = LICENSE_TEXT_URL.format(license_id=license_id)

    try:
        if client is not None:
            response = await client.get(url)
        else:
            async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as own_client:
                response = await own_client.get(url)
        response.raise_for_status()
    except httpx.HTTPError:
        return ""

    return response.text
