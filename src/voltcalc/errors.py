"""Exception types raised by the calculator."""


class VoltcalcError(Exception):
    """Base class for calculator errors."""


class InvalidConfiguration(VoltcalcError):
    """Battery configuration cannot produce a charge percentage.

    Raised for an unknown profile key, a non-positive series cell count,
    or bounds where the full voltage does not exceed the empty voltage.
    """


class UnparseableVoltage(VoltcalcError, ValueError):
    """Voltage reading is not a finite number."""

    def __init__(self, raw):
        super().__init__(f"Unparseable voltage reading: {raw!r}")
        self.raw = raw


class OutOfPlausibleRange(VoltcalcError, ValueError):
    """Recognised number is outside every plausible battery voltage range."""

    def __init__(self, value: float):
        super().__init__(f"{value} is not a plausible battery voltage")
        self.value = value
