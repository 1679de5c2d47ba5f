"""Binary command and settings protocol, wire-format tables and a buffered communication wrapper."""

__version__ = "0.1.0"

__all__ = [
    "com",
    "commands",
    "constants",
    "eepts",
    "errors",
    "header",
    "managed_com",
    "protocol",
    "ring",
    "settings",
    "timing",
]