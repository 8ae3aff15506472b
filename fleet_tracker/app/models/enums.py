"""
Domain enumerations.

Closed vocabularies shared by models, schemas and services.
"""

import enum


def enum_values(enum_cls):
    """Persist enum members by value ("active") rather than by name ("ACTIVE")."""
    return [member.value for member in enum_cls]


class DropdownType(str, enum.Enum):
    """Category of a configurable dropdown option."""
    PROJECT = "project"
    WAY_BRIDGE = "way_bridge"
    LOADING_POINT = "loading_point"
    UNLOADING_POINT = "unloading_point"
    TRANSPORTER = "transporter"
    WB_LOADING_POINT = "wb_loading_point"


class SelectionType(str, enum.Enum):
    """Stage a trip (or a saved selection) was started from."""
    WAY_BRIDGE = "way_bridge"
    LOADING_POINT = "loading_point"
    UNLOADING_POINT = "unloading_point"


class TripStatus(str, enum.Enum):
    """
    Trip status enumeration.

    active -> completed | cancelled. Both end states are terminal.
    """
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class LoadingStatus(str, enum.Enum):
    """Progress of a loading point record."""
    STARTED = "started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class ActivityType(str, enum.Enum):
    """Device-reported motion activity for a telemetry sample."""
    STILL = "still"
    WALKING = "walking"
    RUNNING = "running"
    CYCLING = "cycling"
    DRIVING = "driving"
    UNKNOWN = "unknown"


class Permission(str, enum.Enum):
    """
    Known permission vocabulary, formatted as ``<resource>:<action>``.
    """
    USERS_READ = "users:read"
    USERS_CREATE = "users:create"
    USERS_UPDATE = "users:update"
    USERS_DELETE = "users:delete"
    LOCATIONS_READ = "locations:read"
    LOCATIONS_CREATE = "locations:create"
    LOCATIONS_UPDATE = "locations:update"
    LOCATIONS_DELETE = "locations:delete"
    REPORTS_READ = "reports:read"
    REPORTS_CREATE = "reports:create"
    REPORTS_EXPORT = "reports:export"
    SETTINGS_READ = "settings:read"
    SETTINGS_UPDATE = "settings:update"


# Dropdown types that may be used as a selection, keyed by selection type
SELECTION_DROPDOWN_TYPES = {
    SelectionType.WAY_BRIDGE: DropdownType.WAY_BRIDGE,
    SelectionType.LOADING_POINT: DropdownType.LOADING_POINT,
    SelectionType.UNLOADING_POINT: DropdownType.UNLOADING_POINT,
}
