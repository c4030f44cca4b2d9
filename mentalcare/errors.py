GENERIC_SEND_ERROR = "An error occurred while processing your message. Please try again."
GENERIC_DELETE_ERROR = "An error occurred while deleting your history."


class MentalCareError(Exception):
    """Base class for failures that end up in front of the user as one string."""

    status_code = 500
    user_message = GENERIC_SEND_ERROR

    def __init__(self, detail="", user_message=None):
        super().__init__(detail or self.user_message)
        self.detail = detail
        if user_message is not None:
            self.user_message = user_message

    def to_dict(self):
        return {"error": self.user_message}


class ValidationError(MentalCareError):
    status_code = 400
    user_message = "Invalid input."

    def __init__(self, fields, detail="", user_message=None):
        self.fields = list(fields)
        super().__init__(detail or f"invalid fields: {', '.join(self.fields)}", user_message)

    def to_dict(self):
        return {"error": self.user_message, "fields": self.fields}


class MalformedModelOutput(MentalCareError):
    status_code = 502


class ExternalServiceError(MentalCareError):
    status_code = 502


class PersistenceError(MentalCareError):
    status_code = 500


class AuthError(MentalCareError):
    status_code = 401
    user_message = "Authentication required."
