"""Exception hierarchy for rules-translator."""

from __future__ import annotations


class RulesTranslatorError(RuntimeError):
    """Base class for errors reported to the user as a single line."""


class TranslatorConfigError(RulesTranslatorError):
    """Raised when configuration parsing or validation fails."""


class InputDirectoryError(TranslatorConfigError):
    """Raised when the rules source directory is missing."""


class RuleParseError(RulesTranslatorError):
    """Raised when a rule document has malformed front-matter."""


class ProviderLoadError(RulesTranslatorError):
    """Raised when providers cannot be assembled for a run."""


class UnknownProviderError(ProviderLoadError):
    """Raised when a requested built-in provider id does not exist."""


class ProviderValidationError(ProviderLoadError):
    """Raised when an object does not satisfy the provider interface."""


__all__ = [
    "RulesTranslatorError",
    "TranslatorConfigError",
    "InputDirectoryError",
    "RuleParseError",
    "ProviderLoadError",
    "UnknownProviderError",
    "ProviderValidationError",
]
