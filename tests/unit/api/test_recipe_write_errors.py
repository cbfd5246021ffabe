"""Unit tests for how failed recipe writes map to HTTP errors."""

from uuid import uuid4

import pytest

from api.v1.routes.recipes import _raise_for_write
from core.exceptions import AppException, ErrorCode, RecipeNotFoundError
from domain.result import Err, ErrorKind


class TestRaiseForWrite:
    def test_invalid_value_is_bad_request(self) -> None:
        with pytest.raises(AppException) as exc_info:
            _raise_for_write(Err(ErrorKind.INVALID, "cooking_time must be a positive number"))

        assert exc_info.value.status_code == 400
        assert exc_info.value.error_code == ErrorCode.VALIDATION_ERROR
        assert exc_info.value.message == "cooking_time must be a positive number"

    def test_not_found_with_id_is_404(self) -> None:
        with pytest.raises(RecipeNotFoundError):
            _raise_for_write(Err(ErrorKind.NOT_FOUND), uuid4())

    def test_backend_failure_is_unavailable(self) -> None:
        with pytest.raises(AppException) as exc_info:
            _raise_for_write(Err(ErrorKind.BACKEND, "Database error during create_recipe"))

        assert exc_info.value.status_code == 503
        assert exc_info.value.error_code == ErrorCode.DATABASE_ERROR
