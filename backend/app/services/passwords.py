"""
Temporary password generation.
"""

import secrets

PASSWORD_LENGTH = 16

UPPERCASE = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
LOWERCASE = "abcdefghijklmnopqrstuvwxyz"
DIGITS = "0123456789"
SYMBOLS = "!@#$%^&*"

_CHARACTER_CLASSES = (UPPERCASE, LOWERCASE, DIGITS, SYMBOLS)
_ALL_CHARACTERS = "".join(_CHARACTER_CLASSES)


def generate_secure_password(length: int = PASSWORD_LENGTH) -> str:
    """
    Return a random password with at least one character from each class.

    Entra ID's default complexity policy needs three of the four classes.
    """
    if length < len(_CHARACTER_CLASSES):
        raise ValueError(f"Password length must be at least {len(_CHARACTER_CLASSES)}")

    chars = [secrets.choice(charset) for charset in _CHARACTER_CLASSES]
    chars += [secrets.choice(_ALL_CHARACTERS) for _ in range(length - len(chars))]
    secrets.SystemRandom().shuffle(chars)
    return "".join(chars)
