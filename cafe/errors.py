class CafeError(Exception):
    """a failed operation; the message is shown to the user as-is"""


class AccessDenied(CafeError):
    """the session user lacks the role an operation needs"""
