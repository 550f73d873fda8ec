"""Field validators for FormGuard."""

from formguard.validators.email import EmailValidator
from formguard.validators.injection import InjectionDetector
from formguard.validators.message import MessageAnalyzer
from formguard.validators.name import NameValidator

__all__ = [
    "NameValidator",
    "EmailValidator",
    "MessageAnalyzer",
    "InjectionDetector",
]
