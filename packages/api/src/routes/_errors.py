# This project was developed with assistance from AI tools.
"""Shared mapping of workflow service errors onto HTTP responses."""

from collections.abc import Iterator
from contextlib import contextmanager

from fastapi import HTTPException, status

from ..services.transitions import InvalidTransitionError, WorkflowValidationError


@contextmanager
def workflow_errors() -> Iterator[None]:
    """422 for bad input, 409 when the record's status does not allow the move."""
    try:
        yield
    except WorkflowValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(exc),
        ) from exc
    except InvalidTransitionError as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(exc),
        ) from exc


def not_found(what: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{what} not found")
