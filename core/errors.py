"""
Error kinds shared by the codec, scorer, analysis client and server.
"""


class SoulMatchError(Exception):
    """Base class. `message` is safe to show to an end user."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class DecodeFailure(SoulMatchError):
    """Token is malformed, corrupt or tampered. Never escapes the codec."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__("Invalid code, please check it and try again.")


class ScenarioMismatch(SoulMatchError):
    def __init__(self, host_label: str, guest_label: str):
        self.host_label = host_label
        self.guest_label = guest_label
        super().__init__(
            f"These results come from different tests: the invite is a "
            f"'{host_label}' but yours is a '{guest_label}'. "
            f"Both sides need to take the same test."
        )


class CatalogLengthMismatch(SoulMatchError):
    def __init__(self, scenario_label: str, expected: int, actual: int):
        self.scenario_label = scenario_label
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"This '{scenario_label}' result has {actual} answers but the current "
            f"questionnaire has {expected} questions. Please redo the questionnaire."
        )


class TransientNetworkFailure(SoulMatchError):
    """Timeout or 429/5xx that outlived every retry."""

    def __init__(self, attempts: int, status_code: int | None = None):
        self.attempts = attempts
        self.status_code = status_code
        detail = f"status {status_code}" if status_code else "network error"
        super().__init__(f"Report service unavailable after {attempts} attempts ({detail}).")


class ReportRequestFailed(SoulMatchError):
    """Non-retryable HTTP failure from the report service."""

    def __init__(self, status_code: int, body: str = ""):
        self.status_code = status_code
        self.body = body
        super().__init__(f"Report request failed: {status_code} - {body[:200]}")


class VendorRequestFailed(SoulMatchError):
    """The LLM vendor answered with an error or an unusable body."""

    def __init__(self, reason: str, status_code: int | None = None):
        self.reason = reason
        self.status_code = status_code
        prefix = f"Custom API Error: {status_code} - " if status_code else ""
        super().__init__(f"{prefix}{reason}")


class VendorConfigurationFailure(SoulMatchError):
    def __init__(self, reason: str = "MISSING_API_KEY"):
        self.reason = reason
        super().__init__(f"Server configuration error: {reason}")


class CacheUnavailable(SoulMatchError):
    """Raised inside the cache layer only; callers see a miss instead."""


class AnalysisCancelled(SoulMatchError):
    def __init__(self):
        super().__init__("Analysis was cancelled.")
