"""
Operation result domain objects for dslm.

Switch operations never raise for expected failures. They report
through a SwitchResult carrying the error kind and a human-readable
message.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class ErrorKind(Enum):
    """Kinds of failure a switch operation can end with."""
    INVALID_REPOSITORY = "invalid_repository"
    INVALID_DESTINATION = "invalid_destination"
    DESTINATION_CONFLICT = "destination_conflict"
    NO_CANDIDATE = "no_candidate"
    ALREADY_LINKED = "already_linked"
    CANCELLED = "cancelled"
    FILESYSTEM = "filesystem"


class SwitchState(Enum):
    """Progress of a single switch operation."""
    VALIDATING = "validating"
    REMOVING_STALE_LINKS = "removing_stale_links"
    CREATING_LINKS = "creating_links"
    DONE = "done"
    ABORTED = "aborted"


@dataclass
class SwitchResult:
    """
    Result of a core, distribution or profile switch.

    Attributes:
        operation: "switch_core", "switch_dist", "link_profile" or "new_site"
        destination: Installation directory the operation worked on
        version: Raw name of the package actually applied
        state: Final state (DONE or ABORTED)
        aborted_in: State the operation was in when it aborted
        error_kind: Kind of failure, if any
        error: Human-readable failure message, if any
    """
    operation: str
    destination: str
    version: Optional[str] = None
    state: SwitchState = SwitchState.VALIDATING
    aborted_in: Optional[SwitchState] = None
    error_kind: Optional[ErrorKind] = None
    error: Optional[str] = None
    links_removed: List[str] = field(default_factory=list)
    links_created: List[str] = field(default_factory=list)
    dirs_created: List[str] = field(default_factory=list)
    files_copied: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return self.state == SwitchState.DONE and self.error_kind is None

    @property
    def cancelled(self) -> bool:
        return self.error_kind == ErrorKind.CANCELLED

    def abort(self, kind: ErrorKind, message: str) -> 'SwitchResult':
        """Mark the operation aborted in its current state."""
        self.aborted_in = self.state
        self.state = SwitchState.ABORTED
        self.error_kind = kind
        self.error = message
        return self

    def to_dict(self) -> Dict[str, Any]:
        result = {
            'operation': self.operation,
            'destination': self.destination,
            'version': self.version,
            'state': self.state.value,
            'success': self.success,
            'links_removed': self.links_removed,
            'links_created': self.links_created,
            'dirs_created': self.dirs_created,
        }
        if self.files_copied:
            result['files_copied'] = self.files_copied
        if self.metadata:
            result.update(self.metadata)
        if self.error_kind:
            result['error_kind'] = self.error_kind.value
            result['error'] = self.error
        if self.aborted_in:
            result['aborted_in'] = self.aborted_in.value
        return result


@dataclass(frozen=True)
class SiteInfo:
    """Core and extension packages an installation currently links to."""
    destination: str
    core: Optional[str] = None
    dist: Optional[str] = None
    profiles: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        result = {
            'destination': self.destination,
            'core': self.core,
            'dist': self.dist,
        }
        if self.profiles:
            result['profiles'] = dict(self.profiles)
        return result
