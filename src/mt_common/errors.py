"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth/User
  2xxx: Ledger
  3xxx: Task
  4xxx: Submission
  5xxx: Withdrawal
  6xxx: Payment
  9xxx: System
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 1xxx: Auth/User ---

class UnauthenticatedError(AppError):
    def __init__(self) -> None:
        super().__init__(1001, "Unauthorized Access", 401)


class ForbiddenError(AppError):
    def __init__(self, detail: str = "Forbidden Access") -> None:
        super().__init__(1002, detail, 403)


class UserNotFoundError(AppError):
    def __init__(self, identity: str) -> None:
        super().__init__(1003, f"User not found: {identity}", 404)


# --- 2xxx: Ledger ---

class InsufficientFundsError(AppError):
    def __init__(self, required: int, available: int) -> None:
        super().__init__(
            2001,
            f"Insufficient coins: required {required}, available {available}",
            422,
        )


# --- 3xxx: Task ---

class TaskNotFoundError(AppError):
    def __init__(self, task_id: str) -> None:
        super().__init__(3001, f"Task not found: {task_id}", 404)


class NoSlotsAvailableError(AppError):
    def __init__(self, task_id: str) -> None:
        super().__init__(3002, f"Task {task_id} has no open worker slots", 422)


# --- 4xxx: Submission ---

class SubmissionNotFoundError(AppError):
    def __init__(self, submission_id: str) -> None:
        super().__init__(4001, f"Submission not found: {submission_id}", 404)


class SubmissionAlreadyReviewedError(AppError):
    def __init__(self, submission_id: str, status: str) -> None:
        super().__init__(
            4002, f"Submission {submission_id} was already reviewed ({status})", 409
        )


# --- 5xxx: Withdrawal ---

class WithdrawalNotFoundError(AppError):
    def __init__(self, withdrawal_id: str) -> None:
        super().__init__(5001, f"Withdrawal not found: {withdrawal_id}", 404)


class WithdrawalAlreadySettledError(AppError):
    def __init__(self, withdrawal_id: str, status: str) -> None:
        super().__init__(
            5002, f"Withdrawal {withdrawal_id} was already settled ({status})", 409
        )


# --- 6xxx: Payment ---

class DuplicatePaymentError(AppError):
    def __init__(self, transaction_id: str) -> None:
        super().__init__(6001, f"Conflicting duplicate payment: {transaction_id}", 409)


# --- 9xxx: System ---

class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)


class ValidationError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(9003, detail, 400)
