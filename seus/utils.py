import re
import secrets
import string

ALPHABET = string.ascii_letters + string.digits + "_"

URL_PATTERN = re.compile(r"https?://[A-Za-z0-9_.-]+")

def generate_random_code(length: int = 6) -> str:
    return "".join(secrets.choice(ALPHABET) for _ in range(length))

def is_valid_url(url: str) -> bool:
    return URL_PATTERN.fullmatch(url) is not None

def is_valid_code(code: str, length: int = 6) -> bool:
    return len(code) == length and all(c in ALPHABET for c in code)
