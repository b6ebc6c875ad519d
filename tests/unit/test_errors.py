"""Tests for mt_common.errors and mt_common.response."""

from unittest.mock import MagicMock

from src.mt_common.errors import (
    AppError,
    DuplicatePaymentError,
    ForbiddenError,
    InsufficientFundsError,
    NoSlotsAvailableError,
    SubmissionAlreadyReviewedError,
    TaskNotFoundError,
    UnauthenticatedError,
    ValidationError,
    WithdrawalAlreadySettledError,
)
from src.mt_common.response import ApiResponse, error_response, respond, success_response


class TestAppError:
    def test_base_error(self) -> None:
        err = AppError(code=9002, message="Internal error")
        assert err.code == 9002
        assert err.message == "Internal error"
        assert err.http_status == 500

    def test_is_exception(self) -> None:
        assert isinstance(AppError(code=1, message="x"), Exception)


class TestSpecificErrors:
    def test_insufficient_funds(self) -> None:
        err = InsufficientFundsError(required=60, available=40)
        assert err.code == 2001
        assert err.http_status == 422
        assert "60" in err.message
        assert "40" in err.message

    def test_auth_errors(self) -> None:
        assert UnauthenticatedError().http_status == 401
        assert ForbiddenError().http_status == 403
        assert ForbiddenError().message == "Forbidden Access"

    def test_task_errors(self) -> None:
        assert TaskNotFoundError("task_1").http_status == 404
        err = NoSlotsAvailableError("task_1")
        assert err.code == 3002
        assert err.http_status == 422

    def test_repeat_decisions_are_conflicts(self) -> None:
        sub = SubmissionAlreadyReviewedError("sub_1", "approved")
        wd = WithdrawalAlreadySettledError("wd_1", "denied")
        assert (sub.code, sub.http_status) == (4002, 409)
        assert (wd.code, wd.http_status) == (5002, 409)
        assert "approved" in sub.message
        assert "denied" in wd.message

    def test_duplicate_payment(self) -> None:
        err = DuplicatePaymentError("txn_9")
        assert err.code == 6001
        assert err.http_status == 409

    def test_validation(self) -> None:
        err = ValidationError("body.title: too short")
        assert err.code == 9003
        assert err.http_status == 400


class TestApiResponse:
    def test_success(self) -> None:
        resp = success_response({"coins": 40})
        assert resp.code == 0
        assert resp.message == "success"
        assert resp.data == {"coins": 40}
        assert resp.request_id.startswith("req_")

    def test_error(self) -> None:
        resp = error_response(2001, "Insufficient coins")
        assert resp.code == 2001
        assert resp.data is None

    def test_respond_copies_request_id(self) -> None:
        request = MagicMock()
        request.state.request_id = "req_abc123"
        resp = respond(request, [1, 2], message="ok")
        assert isinstance(resp, ApiResponse)
        assert resp.request_id == "req_abc123"
        assert resp.message == "ok"
        assert resp.data == [1, 2]
