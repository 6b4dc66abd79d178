import base64
import binascii
import enum
from typing import Optional, Tuple

from civrelay.storage import CredentialStore


class ProbeResult(enum.Enum):
    NO_PASSWORD = 'no_password'
    AUTHORIZED = 'authorized'
    MISMATCH = 'mismatch'


class AuthGate:
    """Decides whether a (user_id, password) pair is currently authorized.

    A user with no stored password is open: any caller, with any password
    or none, is treated as that user. Otherwise the presented password must
    equal the stored one exactly. Passwords are compared as given, without
    hashing or normalization.
    """

    def __init__(self, credentials: CredentialStore):
        self.credentials = credentials

    def authorize(self, user_id: str, password: Optional[str]) -> bool:
        stored = self.credentials.get(user_id)
        if stored is None:
            return True
        return password is not None and password == stored

    def probe(self, user_id: str, password: Optional[str]) -> ProbeResult:
        stored = self.credentials.get(user_id)
        if stored is None:
            return ProbeResult.NO_PASSWORD
        if password is not None and password == stored:
            return ProbeResult.AUTHORIZED
        return ProbeResult.MISMATCH


def credentials_from(request) -> Optional[Tuple[str, str]]:
    """Return ``(user_id, password)`` from HTTP Basic auth, or None.

    A decoded value without a ``:`` separator counts as malformed.
    """
    auth = request.authorization
    if auth is None or auth.type != 'basic' or auth.username is None:
        return None
    _, _, encoded = request.headers.get('Authorization', '').strip().partition(' ')
    try:
        decoded = base64.b64decode(encoded.strip()).decode('utf-8')
    except (binascii.Error, UnicodeError):
        return None
    if ':' not in decoded:
        return None
    return auth.username, auth.password
