from .timestamp import Timestamp

__all__ = ["Timestamp"]
