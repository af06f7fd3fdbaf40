"""
Mapping of typed component errors onto HTTP responses.
"""

from fastapi import HTTPException

from curation.domain.errors import CollectionError

STATUS_BY_KIND: dict[str, int] = {
    "not_found": 404,
    "permission_denied": 403,
    "validation": 400,
    "conflict": 409,
    "dependency_unavailable": 503,
}


def raise_for_errors(errors: list[CollectionError]) -> None:
    """Raise an HTTPException for the first error's kind, carrying all errors."""
    if not errors:
        raise HTTPException(status_code=500, detail="Operation failed")

    raise HTTPException(
        status_code=STATUS_BY_KIND.get(errors[0].kind, 500),
        detail=[
            {"kind": err.kind, "code": err.code, "message": err.message, "field": err.field}
            for err in errors
        ],
    )
