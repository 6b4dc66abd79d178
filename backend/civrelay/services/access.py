from typing import Optional

from flask import current_app

from civrelay.auth import AuthGate
from civrelay.errors import NotFound, PasswordTooShort, Unauthorized
from civrelay.storage import CredentialStore, FileStore


class AccessPolicy:
    """Conditional reads and writes of passwords and save files.

    Every check reads the store and the write follows as a separate call,
    so two concurrent writers may both pass against a value that is stale
    by the time they write.
    """

    def __init__(self, gate: AuthGate, credentials: CredentialStore, files: FileStore,
                 min_password_length: int = 6):
        self.gate = gate
        self.credentials = credentials
        self.files = files
        self.min_password_length = min_password_length

    def set_password(self, user_id: str, current_password: Optional[str], new_password: str) -> None:
        """Replace the user's password.

        The presented password is checked against the one currently stored;
        a first write (nothing stored yet) is always allowed.
        """
        if not self.gate.authorize(user_id, current_password):
            current_app.logger.info(f"[auth-set] user={user_id} rejected: mismatch")
            raise Unauthorized()
        if len(new_password) < self.min_password_length:
            raise PasswordTooShort(self.min_password_length)
        self.credentials.put(user_id, new_password)
        current_app.logger.info(f"[auth-set] user={user_id} password updated")

    def read_file(self, user_id: str, password: Optional[str], file_name: str) -> str:
        content = self.files.get(file_name)
        if content is None:
            raise NotFound()
        if not self.gate.authorize(user_id, password):
            current_app.logger.info(f"[file-read] file={file_name} user={user_id} unauthorized")
            raise Unauthorized()
        return content

    def write_file(self, user_id: str, password: Optional[str], file_name: str, content: str) -> None:
        # Existing files are gated on the writer's own credential, not on
        # whoever created the file.
        if self.files.get(file_name) is not None:
            if not self.gate.authorize(user_id, password):
                current_app.logger.info(f"[file-write] file={file_name} user={user_id} unauthorized")
                raise Unauthorized()
        self.files.put(file_name, content)
        current_app.logger.info(f"[file-write] file={file_name} user={user_id} bytes={len(content)}")
