from __future__ import annotations


class PracticeError(Exception):
	"""Base class for every error raised by the practice core."""


class InvalidArgument(PracticeError, ValueError):
	pass


class OutOfRange(PracticeError, ValueError):
	pass


class NoActiveSession(PracticeError, RuntimeError):
	pass


class PersistenceFailure(PracticeError, RuntimeError):
	"""The storage backend could not complete an operation."""
