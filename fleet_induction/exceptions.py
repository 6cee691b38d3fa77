# fleet_induction/exceptions.py
from typing import Optional


class InductionEngineError(Exception):
    """Base class for errors raised while evaluating a train"""

    def __init__(self, message: str, train_id: Optional[str] = None, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.train_id = train_id
        self.field = field


class ConfigurationError(InductionEngineError):
    """Input that makes a scoring rule undefined (e.g. zero branding target hours)"""


class MalformedInputError(InductionEngineError):
    """A train record that cannot be parsed, identified by train and field"""

    def __str__(self) -> str:
        return f"Train {self.train_id or '<unknown>'}: field '{self.field}' {self.message}"
