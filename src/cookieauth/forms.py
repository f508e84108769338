# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Form field extraction for the login endpoint.

Body fields come first and URL query fields after them, so ``first()`` prefers
the body value when a key appears in both. Only url-encoded bodies are read;
any other content type contributes no body fields. Bytes that are not valid
UTF-8 are kept as surrogate escapes rather than rejected.
"""

from __future__ import annotations

import re
from typing import Dict, List
from urllib.parse import parse_qsl

from starlette.requests import Request

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
MAX_FORM_BYTES = 10 << 20

_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


class FormParseError(ValueError):
    pass


def parse_urlencoded(text: str) -> List[tuple]:
    if _BAD_ESCAPE.search(text):
        raise FormParseError("invalid percent escape")
    try:
        return parse_qsl(text, keep_blank_values=True, encoding="utf-8", errors="surrogateescape")
    except ValueError as e:
        raise FormParseError(str(e)) from e


async def _read_limited(request: Request, limit: int) -> bytes:
    chunks = []
    total = 0
    async for chunk in request.stream():
        total += len(chunk)
        if total > limit:
            raise FormParseError("form body too large")
        chunks.append(chunk)
    return b"".join(chunks)


def _media_type(request: Request) -> str:
    return request.headers.get("content-type", "").split(";", 1)[0].strip().lower()


async def parse_form(request: Request) -> Dict[str, List[str]]:
    form: Dict[str, List[str]] = {}

    if request.method in {"POST", "PUT", "PATCH"} and _media_type(request) == FORM_CONTENT_TYPE:
        body = await _read_limited(request, MAX_FORM_BYTES)
        text = body.decode("utf-8", errors="surrogateescape")
        for k, v in parse_urlencoded(text):
            form.setdefault(k, []).append(v)

    for k, v in parse_urlencoded(request.url.query):
        form.setdefault(k, []).append(v)

    return form


def first(form: Dict[str, List[str]], key: str) -> str:
    vals = form.get(key) or []
    return vals[0] if vals else ""
