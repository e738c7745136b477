from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, Type

from ..core.exceptions import ApiError, ApiUnauthorizedError, DomainError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)


@contextmanager
def translate_api_errors(error_cls: Type[DomainError], message: str, *, not_found: str = "") -> Iterator[None]:
    """Turn gateway failures into the domain error the views know how to surface.

    Auth failures pass through untouched so the session gate can react.
    Malformed payloads (ValidationError at ingress) are reported like API errors.
    """

    try:
        yield
    except ApiUnauthorizedError:
        raise
    except ApiError as e:
        if not_found and e.status_code == 404:
            raise NotFoundError(not_found) from e
        logger.warning("%s: %s", message, e)
        raise error_cls(message) from e
    except ValidationError as e:
        logger.warning("%s (bad payload): %s", message, e)
        raise error_cls(message) from e
