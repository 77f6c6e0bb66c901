"""Service layer — session state, refresh protocol, and intent handlers."""


class ServiceError(Exception):
    """Base service exception."""


class PreconditionNotMet(ServiceError):
    """Input or state rejected before any remote call is issued."""


class NoActiveProject(PreconditionNotMet):
    """No project is open."""


class DependencyNotSelected(PreconditionNotMet):
    """Add confirmed without a search selection."""


class EmptyConstraint(PreconditionNotMet):
    """Blank version constraint supplied."""


class EmptyQuery(PreconditionNotMet):
    """Blank search query or project path."""


class CandidateNotFound(PreconditionNotMet):
    """Selected name is not among the current search candidates."""


class GatewayFailure(ServiceError):
    """The remote call itself failed, whatever the underlying cause."""


class RefreshFailed(GatewayFailure):
    """Query-all-dependencies failed; the previous snapshot is kept."""


class BackendMutationFailed(GatewayFailure):
    """A mutating command failed; no refresh was issued."""


class SearchFailed(GatewayFailure):
    """Registry lookup failed; the previous search result is kept."""


class ProjectInitFailed(GatewayFailure):
    """The backend refused to initialise the selected directory."""


class StateInvariantViolation(ServiceError):
    """Client state reached a combination the workflow should prevent."""
