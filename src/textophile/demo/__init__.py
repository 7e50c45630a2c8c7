"""Example commands built on the prompt engine."""

from .login import LoginCommand, PasswordCommand, User, authenticate
from .shell import ShellArgs, ShellCommand
from .stack import StackCommand

__all__ = [
    "LoginCommand",
    "PasswordCommand",
    "ShellArgs",
    "ShellCommand",
    "StackCommand",
    "User",
    "authenticate",
]
