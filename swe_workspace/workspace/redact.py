"""Credential scrubbing for command strings and command output."""

from __future__ import annotations

import re
from typing import Iterable

REDACTED = "<REDACTED>"

# Greedy up to the last "@" on the line: the token itself may contain "@" or ":".
_ACCESS_TOKEN_RE = re.compile(r"x-access-token:[^\n]*@")
_URL_USERINFO_RE = re.compile(
    r"(\b[a-zA-Z][a-zA-Z0-9+.-]*://)(?!x-access-token:)[^\s/@]+@"
)


def redact_secrets(text: str, secrets: Iterable[str | None] = ()) -> str:
    """Return ``text`` with embedded credentials replaced by ``<REDACTED>``.

    Explicitly known secret values are removed first, then any
    ``x-access-token:<token>@`` credential and any other URL userinfo.
    """

    if not text:
        return text
    for secret in secrets:
        if secret:
            text = text.replace(secret, REDACTED)
    text = _ACCESS_TOKEN_RE.sub(f"x-access-token:{REDACTED}@", text)
    return _URL_USERINFO_RE.sub(rf"\1{REDACTED}@", text)
