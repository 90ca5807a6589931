
class AnalysisError(Exception):
    """Base error for the assessment pipeline."""
    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class InputValidationError(AnalysisError):
    """Missing document text, regulations or credential. Raised before any network call."""
    pass


class RequestFailed(AnalysisError):
    """Transport failure or non-success answer from the scoring backend."""
    pass
