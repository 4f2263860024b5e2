"""Change records and comparison results."""

from collections import Counter
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ChangeSeverity(str, Enum):
    """Ordered severity: CRITICAL > MAJOR > MINOR > WARNING > INFO."""

    CRITICAL = "CRITICAL"
    MAJOR = "MAJOR"
    MINOR = "MINOR"
    WARNING = "WARNING"
    INFO = "INFO"

    @property
    def rank(self) -> int:
        """0 for CRITICAL up to 4 for INFO; sort ascending for most severe first."""
        return _SEVERITY_ORDER.index(self)

    def __lt__(self, other):
        if not isinstance(other, ChangeSeverity):
            return NotImplemented
        return self.rank > other.rank

    def __gt__(self, other):
        if not isinstance(other, ChangeSeverity):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, ChangeSeverity):
            return NotImplemented
        return self.rank >= other.rank

    def __ge__(self, other):
        if not isinstance(other, ChangeSeverity):
            return NotImplemented
        return self.rank <= other.rank


_SEVERITY_ORDER = list(ChangeSeverity)


class ChangeType(str, Enum):
    """Tag identifying the rule family a change record came from."""

    # endpoints
    ENDPOINT_REMOVED = "ENDPOINT_REMOVED"
    ENDPOINT_ADDED = "ENDPOINT_ADDED"
    METHOD_REMOVED = "METHOD_REMOVED"
    METHOD_ADDED = "METHOD_ADDED"
    OPERATION_DEPRECATED_ADDED = "OPERATION_DEPRECATED_ADDED"
    # parameters
    PARAMETER_ADDED = "PARAMETER_ADDED"
    PARAMETER_REQUIRED_ADDED = "PARAMETER_REQUIRED_ADDED"
    PARAMETER_REMOVED = "PARAMETER_REMOVED"
    PARAMETER_TYPE_CHANGED = "PARAMETER_TYPE_CHANGED"
    PARAMETER_LOCATION_CHANGED = "PARAMETER_LOCATION_CHANGED"
    PARAMETER_STYLE_CHANGED = "PARAMETER_STYLE_CHANGED"
    PARAMETER_EXPLODE_CHANGED = "PARAMETER_EXPLODE_CHANGED"
    PARAMETER_DEPRECATED_ADDED = "PARAMETER_DEPRECATED_ADDED"
    # request body
    REQUEST_BODY_REMOVED = "REQUEST_BODY_REMOVED"
    REQUEST_BODY_ADDED = "REQUEST_BODY_ADDED"
    REQUEST_BODY_REQUIRED_ADDED = "REQUEST_BODY_REQUIRED_ADDED"
    REQUEST_CONTENT_TYPE_REMOVED = "REQUEST_CONTENT_TYPE_REMOVED"
    REQUEST_CONTENT_TYPE_ADDED = "REQUEST_CONTENT_TYPE_ADDED"
    REQUEST_SCHEMA_CHANGED = "REQUEST_SCHEMA_CHANGED"
    # responses
    RESPONSE_CODE_REMOVED = "RESPONSE_CODE_REMOVED"
    RESPONSE_CODE_CHANGED = "RESPONSE_CODE_CHANGED"
    RESPONSE_CONTENT_TYPE_REMOVED = "RESPONSE_CONTENT_TYPE_REMOVED"
    RESPONSE_CONTENT_TYPE_ADDED = "RESPONSE_CONTENT_TYPE_ADDED"
    RESPONSE_SCHEMA_CHANGED = "RESPONSE_SCHEMA_CHANGED"
    RESPONSE_HEADER_REMOVED = "RESPONSE_HEADER_REMOVED"
    RESPONSE_HEADER_ADDED = "RESPONSE_HEADER_ADDED"
    RESPONSE_HEADER_REQUIRED_ADDED = "RESPONSE_HEADER_REQUIRED_ADDED"
    # schema properties
    PROPERTY_REMOVED = "PROPERTY_REMOVED"
    PROPERTY_ADDED = "PROPERTY_ADDED"
    PROPERTY_REQUIRED_ADDED = "PROPERTY_REQUIRED_ADDED"
    PROPERTY_TYPE_CHANGED = "PROPERTY_TYPE_CHANGED"
    PROPERTY_FORMAT_CHANGED = "PROPERTY_FORMAT_CHANGED"
    PROPERTY_READ_ONLY_CHANGED = "PROPERTY_READ_ONLY_CHANGED"
    PROPERTY_WRITE_ONLY_CHANGED = "PROPERTY_WRITE_ONLY_CHANGED"
    DEFAULT_VALUE_CHANGED = "DEFAULT_VALUE_CHANGED"
    DEFAULT_VALUE_REMOVED = "DEFAULT_VALUE_REMOVED"
    SCHEMA_DEPRECATED_ADDED = "SCHEMA_DEPRECATED_ADDED"
    # constraints
    PROPERTY_MIN_LENGTH_INCREASED = "PROPERTY_MIN_LENGTH_INCREASED"
    PROPERTY_MAX_LENGTH_DECREASED = "PROPERTY_MAX_LENGTH_DECREASED"
    PROPERTY_PATTERN_ADDED = "PROPERTY_PATTERN_ADDED"
    PROPERTY_PATTERN_CHANGED = "PROPERTY_PATTERN_CHANGED"
    PROPERTY_MINIMUM_INCREASED = "PROPERTY_MINIMUM_INCREASED"
    PROPERTY_MAXIMUM_DECREASED = "PROPERTY_MAXIMUM_DECREASED"
    ARRAY_MIN_ITEMS_INCREASED = "ARRAY_MIN_ITEMS_INCREASED"
    ARRAY_MAX_ITEMS_DECREASED = "ARRAY_MAX_ITEMS_DECREASED"
    ARRAY_UNIQUE_ITEMS_ADDED = "ARRAY_UNIQUE_ITEMS_ADDED"
    # enums and composition
    ENUM_VALUE_REMOVED = "ENUM_VALUE_REMOVED"
    ENUM_VALUE_ADDED = "ENUM_VALUE_ADDED"
    ONE_OF_OPTION_REMOVED = "ONE_OF_OPTION_REMOVED"
    DISCRIMINATOR_CHANGED = "DISCRIMINATOR_CHANGED"
    ADDITIONAL_PROPERTIES_FORBIDDEN = "ADDITIONAL_PROPERTIES_FORBIDDEN"
    ADDITIONAL_PROPERTIES_TYPE_CHANGED = "ADDITIONAL_PROPERTIES_TYPE_CHANGED"
    # security
    SECURITY_REQUIREMENT_ADDED = "SECURITY_REQUIREMENT_ADDED"
    SECURITY_REQUIREMENT_REMOVED = "SECURITY_REQUIREMENT_REMOVED"
    SECURITY_SCHEME_CHANGED = "SECURITY_SCHEME_CHANGED"
    OAUTH_FLOW_CHANGED = "OAUTH_FLOW_CHANGED"
    OAUTH_SCOPE_REMOVED = "OAUTH_SCOPE_REMOVED"
    OAUTH_SCOPE_ADDED = "OAUTH_SCOPE_ADDED"
    # metadata
    API_VERSION_CHANGED = "API_VERSION_CHANGED"
    BASE_PATH_CHANGED = "BASE_PATH_CHANGED"
    # hypermedia and callbacks
    LINK_REMOVED = "LINK_REMOVED"
    LINK_ADDED = "LINK_ADDED"
    CALLBACK_REMOVED = "CALLBACK_REMOVED"
    CALLBACK_ADDED = "CALLBACK_ADDED"
    CALLBACK_URL_CHANGED = "CALLBACK_URL_CHANGED"

    @property
    def label(self) -> str:
        """Human-readable form, e.g. ``Endpoint removed``."""
        return self.value.replace("_", " ").capitalize()


class ApiChange(BaseModel):
    """A single detected difference between two documents."""

    model_config = ConfigDict(frozen=True)

    change_type: ChangeType
    severity: ChangeSeverity
    location: str = Field(min_length=1)  # "/users [GET]", "Schema: User.name", ...
    description: str = ""
    old_value: str | None = None
    new_value: str | None = None
    is_breaking: bool = False


class ComparisonResult(BaseModel):
    """All changes found between two documents.

    Counts and the breaking flag are derived from ``changes`` on access.
    """

    model_config = ConfigDict(frozen=True)

    old_version: str
    new_version: str
    changes: tuple[ApiChange, ...] = ()
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def breaking_changes(self) -> list[ApiChange]:
        return [c for c in self.changes if c.is_breaking]

    @property
    def non_breaking_changes(self) -> list[ApiChange]:
        return [c for c in self.changes if not c.is_breaking]

    @property
    def breaking_changes_count(self) -> int:
        return len(self.breaking_changes)

    @property
    def non_breaking_changes_count(self) -> int:
        return len(self.non_breaking_changes)

    @property
    def total_changes_count(self) -> int:
        return len(self.changes)

    @property
    def has_breaking_changes(self) -> bool:
        return self.breaking_changes_count > 0

    def count_by_type(self) -> dict[ChangeType, int]:
        return dict(Counter(c.change_type for c in self.changes))

    def count_by_severity(self) -> dict[ChangeSeverity, int]:
        """Counts for every severity level, most severe first."""
        counts = Counter(c.severity for c in self.changes)
        return {severity: counts.get(severity, 0) for severity in ChangeSeverity}

    def changes_by_severity(self) -> list[ApiChange]:
        """Changes sorted most severe first; ties keep detection order."""
        return sorted(self.changes, key=lambda c: c.severity.rank)

    def summary(self) -> str:
        return (
            f"{self.old_version} -> {self.new_version}: "
            f"{self.total_changes_count} changes "
            f"({self.breaking_changes_count} breaking, "
            f"{self.non_breaking_changes_count} non-breaking)"
        )
