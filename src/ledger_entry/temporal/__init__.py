"""Clock abstraction used for relative dates and file headers."""

from ledger_entry.temporal.clock import Clock, FakeClock, SystemClock

__all__ = ["Clock", "FakeClock", "SystemClock"]
