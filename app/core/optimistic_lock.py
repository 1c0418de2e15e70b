"""
Version checks for rows mapped with ``version_id_col``.

Clients read the version from the ``ETag`` header and may echo it back in
``If-Match`` on writes. The header is optional on every route; when present
a mismatch is a 409 and the row is left untouched.
"""
from __future__ import annotations

import re

from fastapi import HTTPException, Response, status
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

_IF_MATCH = re.compile(r'^(?:W/)?"?(?P<version>[^"]*)"?$')


def parse_if_match(if_match: str | None) -> int | None:
    """Accepts 3, "3" and W/"3". None when the header is absent."""
    if if_match is None:
        return None

    m = _IF_MATCH.match(if_match.strip())
    try:
        version = int(m.group("version")) if m else None
    except ValueError:
        version = None

    if version is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid If-Match header (expected integer version)",
        )
    if version <= 0:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid If-Match header (version must be positive)",
        )
    return version


def check_version(row, expected: int | None) -> None:
    """409 when the client holds an older (or newer) copy of ``row``."""
    if expected is None or row.version == expected:
        return
    raise HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail={
            "message": "Stale version",
            "expected": row.version,
            "got": expected,
        },
    )


def flush_versioned(db: Session, row) -> None:
    """
    Flush pending changes and reload ``row`` so its bumped version is visible.

    A concurrent writer that committed between our read and this flush makes
    the versioned UPDATE match zero rows; that surfaces as a 409.
    """
    try:
        db.flush()
    except StaleDataError:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Stale version")
    db.refresh(row)


def set_etag(response: Response, row) -> None:
    response.headers["ETag"] = f'"{row.version}"'
