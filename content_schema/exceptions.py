"""
Custom exception classes for the content schema model.

Core editing operations never raise for lookup misses; these exceptions are
raised only at the loading boundaries (configuration files, field-type
registry definitions and raw schema snapshots).
"""

import logging
from typing import Optional, Dict, Any, List
from pathlib import Path

logger = logging.getLogger(__name__)


class SchemaModelError(Exception):
    """
    Base exception for content schema model errors.

    Attributes:
        message: Error message
        context: Additional context information
        recovery_suggestions: List of suggested recovery actions
    """

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None,
                 recovery_suggestions: Optional[List[str]] = None):
        self.message = message
        self.context = context or {}
        self.recovery_suggestions = recovery_suggestions or []
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message

    def with_context(self, **context: Any) -> 'SchemaModelError':
        """
        Add context entries to the error and return it, for ``raise err.with_context(...)``.

        Existing keys are overwritten.
        """
        self.context.update(context)
        return self

    def get_full_details(self) -> Dict[str, Any]:
        """Get complete error details including context and suggestions."""
        return {
            'error_type': self.__class__.__name__,
            'message': self.message,
            'context': self.context,
            'recovery_suggestions': self.recovery_suggestions
        }


class ConfigurationLoadError(SchemaModelError):
    """
    Exception raised when configuration file loading fails.

    This includes YAML parsing errors, file not found, permission issues, etc.
    """

    def __init__(self, config_path: Path, original_error: Exception,
                 message: Optional[str] = None):
        self.config_path = config_path
        self.original_error = original_error

        if message is None:
            message = f"Failed to load configuration from {config_path}: {str(original_error)}"

        context = {
            'config_path': str(config_path),
            'original_error_type': type(original_error).__name__,
            'original_error_message': str(original_error)
        }

        recovery_suggestions = [
            "Check if the configuration file exists and is readable",
            "Verify YAML syntax is correct",
            "Ensure file permissions allow reading",
            "Default configuration is used when loading falls back"
        ]

        super().__init__(message, context, recovery_suggestions)


class SnapshotLoadError(SchemaModelError):
    """
    Exception raised when raw schema snapshot data cannot be turned into a schema.

    Wraps the pydantic ValidationError (or the structural problem) that
    rejected the snapshot.
    """

    def __init__(self, original_error: Exception, message: Optional[str] = None,
                 errors: Optional[List[Dict[str, Any]]] = None):
        self.original_error = original_error
        self.errors = errors or []

        if message is None:
            message = f"Invalid schema snapshot: {str(original_error)}"

        context = {
            'original_error_type': type(original_error).__name__,
            'error_count': len(self.errors),
            'locations': [".".join(str(part) for part in err.get('loc', ())) for err in self.errors]
        }

        recovery_suggestions = [
            "Check that every group has a title and a fields list",
            "Check that every field has id, type, name and title",
            "Ensure field ids are unique across the whole schema"
        ]

        super().__init__(message, context, recovery_suggestions)


class FieldTypeRegistryError(SchemaModelError):
    """Exception raised when a field-type definition is malformed."""

    def __init__(self, definition: Any, problem: str, message: Optional[str] = None):
        self.definition = definition
        self.problem = problem

        if message is None:
            message = f"Invalid field type definition {definition!r}: {problem}"

        context = {
            'definition': definition,
            'problem': problem
        }

        recovery_suggestions = [
            "Each field type entry needs a non-empty 'type' string",
            "Field type 'options' must be a mapping when present"
        ]

        super().__init__(message, context, recovery_suggestions)


def log_error_with_context(error: SchemaModelError, operation: str) -> None:
    """
    Log error with full context information.

    Args:
        error: SchemaModelError instance
        operation: Description of the operation that failed
    """
    logger.error(f"Schema model error during {operation}")
    logger.error(f"Error type: {type(error).__name__}")
    logger.error(f"Error message: {error.message}")

    if error.context:
        logger.error("Error context:")
        for key, value in error.context.items():
            logger.error(f"  {key}: {value}")

    if error.recovery_suggestions:
        logger.info("Recovery suggestions:")
        for i, suggestion in enumerate(error.recovery_suggestions, 1):
            logger.info(f"  {i}. {suggestion}")
