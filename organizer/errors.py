"""Error types raised by the pipeline stages"""


class OrganizerError(Exception):
    """Base class for every failure the entry point reports and exits on."""


class ConfigError(OrganizerError):
    pass


class AuthError(OrganizerError):
    pass


class ListError(OrganizerError):
    pass


class DownloadError(OrganizerError):
    pass


class TranscriptionError(OrganizerError):
    pass


class SheetLogError(OrganizerError):
    pass
