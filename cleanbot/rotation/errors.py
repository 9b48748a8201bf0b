"""Exceptions raised by the rotation core"""


class RotationError(Exception):
    """Base class for rotation failures"""


class PersistenceError(RotationError):
    """The rotation state could not be read from or written to durable storage"""
