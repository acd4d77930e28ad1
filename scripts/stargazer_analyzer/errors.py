#------------------------------------------------------------
#                          errors.py
#        Exception types shared by the pipeline stages.

class StargazerAnalyzerError(Exception):
    pass

class AuthMissingError(StargazerAnalyzerError):
    pass

class UpstreamError(StargazerAnalyzerError):

    def __init__(self, message: str, status_code: int = 0):
        super().__init__(message)
        self.status_code = status_code

class RateLimitedError(UpstreamError):
    pass

class NotFoundError(UpstreamError):
    pass

class TransientUpstreamError(UpstreamError):
    pass

# Raised when an upstream body does not have the expected shape.
class MalformedResponseError(TransientUpstreamError):
    pass
