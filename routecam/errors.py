"""Exception hierarchy for one capture cycle."""


class RouteCamError(Exception):
    """Base class for all routecam errors."""


class CaptureError(RouteCamError):
    """The capture source could not deliver a still image."""


class CaptureBusyError(RouteCamError):
    """A capture was triggered while another cycle is still in flight."""


class DecodeError(RouteCamError):
    """The raw image is corrupt or in an unsupported format."""


class InvalidDimensionsError(RouteCamError):
    """The image geometry cannot be scaled (zero size or degenerate aspect ratio)."""


class EmptyPayloadError(RouteCamError):
    """The encoded image carries no bytes."""


class RemoteCallError(RouteCamError):
    """The analysis endpoint could not be reached or returned an unusable response."""
