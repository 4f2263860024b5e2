"""Exception hierarchy for oas-diff."""


class OasDiffError(Exception):
    """Base class for all oas-diff failures."""


class SpecLoadError(OasDiffError):
    """A specification could not be acquired from its location."""

    def __init__(self, location: str, message: str):
        self.location = str(location)
        super().__init__(f"{self.location}: {message}")


class SpecNotFoundError(SpecLoadError):
    """The location does not point at an existing document."""


class SpecParseError(SpecLoadError):
    """The document exists but is not a usable OpenAPI 3.x description."""


class ComparisonError(OasDiffError):
    """A rule failed while comparing two documents.

    The whole comparison is aborted: a partial report could hide
    breaking changes.
    """

    def __init__(self, rule_name: str, cause: BaseException):
        self.rule_name = rule_name
        self.cause = cause
        super().__init__(f"rule '{rule_name}' failed: {cause!r}")
