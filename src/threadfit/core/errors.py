class ConfigurationError(Exception):
    """Raised when a segmenter configuration is structurally invalid."""


class RecoveryFailure(Exception):
    """A recovery strategy could not interpret its input.

    Internal to the recovery chain: it only signals that the next strategy
    should be tried and never reaches callers of ``parse_units``.
    """

    def __init__(self, strategy: str, detail: str = ""):
        self.strategy = strategy
        self.detail = detail
        super().__init__(f"{strategy}: {detail}" if detail else strategy)
