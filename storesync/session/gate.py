"""Single-flight guard for the create action."""


class BusyGate:
    """A boolean flag that lets at most one holder through at a time.

    Callers that find the gate closed are dropped, not queued. The event
    loop is single-threaded, so test-and-set needs no lock as long as no
    ``await`` sits between the check and the set.
    """

    def __init__(self):
        self._busy = False

    @property
    def busy(self) -> bool:
        return self._busy

    def try_acquire(self) -> bool:
        """Close the gate if it is open.

        Returns:
            True if the caller now holds the gate, False if it was busy.
        """
        if self._busy:
            return False
        self._busy = True
        return True

    def release(self) -> None:
        self._busy = False
