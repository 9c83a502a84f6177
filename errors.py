class GridsiftError(Exception):
    """Base class for failures reported back to the user."""


class InputError(GridsiftError, ValueError):
    """Rejected request: nothing was changed."""


class ClipboardError(GridsiftError):
    pass


class DatasetFileError(GridsiftError):
    pass
