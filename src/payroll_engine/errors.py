class PayrollEngineError(Exception):
    """Base class for payroll engine errors."""


class ConfigurationError(PayrollEngineError):
    """Raised when a tax configuration is malformed."""
