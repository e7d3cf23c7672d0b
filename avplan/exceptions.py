# avplan/exceptions.py
#
# Domain problems (below target, bad slant range, unflyable turn) are carried
# in result records. These exceptions are for the worker transport only.

class AvplanError(Exception):
    """Base exception for the planning engine."""
    pass

class WorkerError(AvplanError):
    """The turn-path worker could not deliver a response."""
    pass

class WorkerBusy(WorkerError):
    """Request channel is full."""
    pass

class WorkerTimeout(WorkerError):
    """No response for the latest request arrived in time."""
    pass

class WorkerClosed(WorkerError):
    """The worker has been shut down."""
    pass

class WorkerCrashed(WorkerError):
    """The worker thread died on an unexpected error."""
    pass
