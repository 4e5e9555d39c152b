import secrets


def new_password_reset_code(length: int = 6) -> str:
    # short numeric code, typed by hand from the email
    if length < 1:
        raise ValueError("length must be >= 1")
    return str(secrets.randbelow(10**length)).zfill(length)
