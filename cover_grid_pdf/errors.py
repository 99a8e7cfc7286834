"""
Exception types for the cover grid pipeline.

Fatal conditions (bad grid size, unreadable input, empty input, failed save)
propagate to the CLI. Per-item download failures stay inside the acquirer.
"""


class CoverGridError(Exception):
	"""Base exception for all cover grid errors."""

	def __init__(self, message: str, details: dict | None = None):
		super().__init__(message)
		self.message = message
		self.details = details or {}


class ConfigurationError(CoverGridError):
	"""Raised when the grid size or other settings are invalid."""
	pass


class InputReadError(CoverGridError):
	"""Raised when the identifier input stream cannot be read."""
	pass


class NoValidIdentifiersError(CoverGridError):
	"""Raised when the input yields no product codes."""
	pass


class AcquisitionError(CoverGridError):
	"""Raised when a single image URL cannot be downloaded."""
	pass


class OutputWriteError(CoverGridError):
	"""Raised when the finished PDF cannot be written."""
	pass
