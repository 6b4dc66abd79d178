"""Key-value persistence for credentials and save files.

The store offers plain get/put/delete with no compare-and-swap. Callers
that read a value and then write conditionally on it (password changes,
file overwrites) are racy against concurrent writers to the same key.
"""
from typing import Optional

from civrelay import db
from civrelay.models import KVEntry

AUTH_PREFIX = 'auth:'
FILE_PREFIX = 'file:'


class KeyValueStore:
    def get(self, key: str) -> Optional[str]:
        entry = db.session.get(KVEntry, key)
        return entry.value if entry is not None else None

    def put(self, key: str, value: str) -> None:
        entry = db.session.get(KVEntry, key)
        if entry is None:
            entry = KVEntry(key=key, value=value)
        else:
            entry.value = value
        db.session.add(entry)
        db.session.commit()

    def delete(self, key: str) -> None:
        entry = db.session.get(KVEntry, key)
        if entry is None:
            return
        db.session.delete(entry)
        db.session.commit()


class NamespacedStore:
    prefix = ''

    def __init__(self, kv: KeyValueStore):
        self.kv = kv

    def key_for(self, name: str) -> str:
        return f'{self.prefix}{name}'

    def get(self, name: str) -> Optional[str]:
        return self.kv.get(self.key_for(name))

    def put(self, name: str, value: str) -> None:
        self.kv.put(self.key_for(name), value)


class CredentialStore(NamespacedStore):
    """Password per user id. An absent key means no password was ever set."""
    prefix = AUTH_PREFIX


class FileStore(NamespacedStore):
    """Opaque text blob per file name."""
    prefix = FILE_PREFIX
