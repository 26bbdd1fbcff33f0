from fastapi import HTTPException, status


class NotAuthenticated(HTTPException):
    def __init__(self, detail: str = "Not authenticated"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class BillNotFound(HTTPException):
    def __init__(self):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail="Bill not found")


class PatientNotFound(HTTPException):
    def __init__(self):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail="Patient not found")


class AppointmentNotFound(HTTPException):
    def __init__(self):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail="Appointment not found")


class ValidationFailed(HTTPException):
    def __init__(self, detail: str, field: str | None = None):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)
        self.field = field


class DuplicatePatient(HTTPException):
    def __init__(self, detail: str, field: str):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)
        self.field = field


class StorageUnavailable(HTTPException):
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="File storage is not configured",
        )


AUTH_ERROR_MESSAGES = {
    "auth/invalid-email": "Invalid email format. Please check and try again.",
    "auth/user-disabled": "This account has been disabled. Contact support.",
    "auth/user-not-found": "No account found with this email.",
    "auth/wrong-password": "Incorrect password. Please try again.",
    "auth/invalid-credential": "Invalid email or password. Please double-check your credentials.",
    "auth/too-many-requests": "Too many failed attempts. Please wait a few minutes and try again.",
    "auth/network-request-failed": "Network error. Please check your internet connection.",
    "auth/email-already-in-use": "An account with this email already exists. Please log in instead.",
    "auth/weak-password": "Password should be at least 6 characters.",
    "auth/missing-fields": "Please fill in all required fields.",
    "auth/internal-error": "Unexpected error occurred. Please try again.",
}

AUTH_ERROR_STATUS = {
    "auth/user-disabled": status.HTTP_403_FORBIDDEN,
    "auth/user-not-found": status.HTTP_401_UNAUTHORIZED,
    "auth/wrong-password": status.HTTP_401_UNAUTHORIZED,
    "auth/invalid-credential": status.HTTP_401_UNAUTHORIZED,
    "auth/too-many-requests": status.HTTP_429_TOO_MANY_REQUESTS,
    "auth/email-already-in-use": status.HTTP_409_CONFLICT,
    "auth/internal-error": status.HTTP_500_INTERNAL_SERVER_ERROR,
}

GENERIC_AUTH_MESSAGE = "Something went wrong. Please try again."


def auth_error_message(code: str | None) -> str:
    return AUTH_ERROR_MESSAGES.get(code or "", GENERIC_AUTH_MESSAGE)


class AuthError(HTTPException):
    def __init__(self, code: str):
        super().__init__(
            status_code=AUTH_ERROR_STATUS.get(code, status.HTTP_400_BAD_REQUEST),
            detail=auth_error_message(code),
        )
        self.code = code
