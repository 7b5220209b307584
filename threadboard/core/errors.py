class BoardError(Exception):
    """Base for every failure the board reports back to its caller."""

    kind = "board_error"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidIdentifier(BoardError):
    kind = "invalid_identifier"

    def __init__(self, raw: str, what: str = "identifier"):
        self.raw = raw
        super().__init__(f"Invalid {what}: {raw!r}")


class InvalidQuery(BoardError):
    kind = "invalid_query"

    def __init__(self, segment: str):
        self.segment = segment
        super().__init__(f"Invalid response query: {segment!r}")


class ThreadNotFound(BoardError):
    kind = "thread_not_found"

    def __init__(self, thread_id: int):
        self.thread_id = thread_id
        super().__init__(f"Thread {thread_id} not found")


class ResponseNotFound(BoardError):
    kind = "response_not_found"

    def __init__(self, thread_id: int, response_number: int):
        self.thread_id = thread_id
        self.response_number = response_number
        super().__init__(
            f"Response {response_number} not found in thread {thread_id}"
        )


class StorageUnavailable(BoardError):
    kind = "storage_unavailable"

    def __init__(self, message: str = "Database is not available"):
        super().__init__(message)


class InvalidPost(BoardError):
    kind = "invalid_post"
