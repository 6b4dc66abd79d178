class RelayError(Exception):
    """An expected request failure, rendered as a plain-text response."""
    status_code = 500
    message = 'Internal server error'

    def __init__(self, message=None, status_code=None):
        super().__init__(message or self.message)
        if message is not None:
            self.message = message
        if status_code is not None:
            self.status_code = status_code


class MissingCredentials(RelayError):
    status_code = 400
    message = 'Possibly malformed authentication header!'


class Unauthorized(RelayError):
    status_code = 401
    message = 'Unauthorized'


class NotFound(RelayError):
    status_code = 404
    message = 'File does not exist'


class PasswordTooShort(RelayError):
    status_code = 400

    def __init__(self, min_length: int):
        super().__init__(f'Password should be at least {min_length} characters long')
