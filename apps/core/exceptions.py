class ConflictError(Exception):
    """
    Raised when an optimistic-lock check fails.

    The record changed after the caller read it; the API answers 409 and the
    client must reload before retrying.
    """

    default_message = 'This record was modified by another user. Please reload and try again.'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)
