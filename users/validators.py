import re

PASSWORD_MIN_LENGTH = 8

PASSWORD_RULES = [
    (
        lambda value: len(value) >= PASSWORD_MIN_LENGTH,
        f"Password must be at least {PASSWORD_MIN_LENGTH} characters long.",
    ),
    (
        lambda value: re.search(r"[A-Z]", value),
        "Password must contain at least one uppercase letter.",
    ),
    (
        lambda value: re.search(r"[a-z]", value),
        "Password must contain at least one lowercase letter.",
    ),
    (
        lambda value: re.search(r"\d", value),
        "Password must contain at least one number.",
    ),
    (
        lambda value: re.search(r"[^A-Za-z0-9]", value),
        "Password must contain at least one special character.",
    ),
]


def password_policy_errors(password):
    """Return the messages of every policy rule ``password`` fails."""
    password = password or ""
    return [message for check, message in PASSWORD_RULES if not check(password)]
