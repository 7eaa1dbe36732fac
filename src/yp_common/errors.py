"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth
  2xxx: Wallet
  3xxx: Product
  5xxx: Position
  6xxx: Accrual
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


# --- 1xxx: Auth ---

class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1003, "Invalid or expired token", 401)


class AdminRequiredError(AppError):
    def __init__(self) -> None:
        super().__init__(1006, "Administrator role required", 403)


# --- 2xxx: Wallet ---

class InsufficientBalanceError(AppError):
    def __init__(self, required: int, available: int) -> None:
        super().__init__(
            2001,
            f"Insufficient balance: required {required} cents, available {available} cents",
            422,
        )


class WalletNotFoundError(AppError):
    def __init__(self, user_id: str) -> None:
        super().__init__(2002, f"Wallet not found for user {user_id}", 404)


# --- 3xxx: Product ---

class ProductNotFoundError(AppError):
    def __init__(self, product_id: str) -> None:
        super().__init__(3001, f"Product not found: {product_id}", 404)


class ProductNotActiveError(AppError):
    def __init__(self, product_id: str) -> None:
        super().__init__(3002, f"Product is not active: {product_id}", 422)


# --- 5xxx: Position ---

class PositionNotEligibleError(AppError):
    def __init__(self, position_id: str, reason: str) -> None:
        super().__init__(5002, f"Position {position_id} cannot accrue: {reason}", 422)


# --- 6xxx: Accrual ---

class AccrualScanError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(6001, f"Failed to fetch active products: {detail}", 500)


class AccrualAlreadyRunningError(AppError):
    def __init__(self, earning_date: str) -> None:
        super().__init__(6002, f"Daily accrual for {earning_date} is already running", 409)


# --- 9xxx: System ---

class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)
