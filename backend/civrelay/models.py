from civrelay import db


class KVEntry(db.Model):
    """One string value per string key.

    Credentials and save files share this table; their keys are namespaced
    as ``auth:{user_id}`` and ``file:{file_name}``.
    """
    __tablename__ = 'kv_entry'
    key = db.Column(db.String(512), primary_key=True)
    value = db.Column(db.Text, nullable=False)

    def __repr__(self):
        return f'<KVEntry {self.key}>'
