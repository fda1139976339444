"""Database models for the game."""
from datetime import datetime
from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()

class GameSession(db.Model):
    """Game session model; one player's game."""
    __tablename__ = 'game_sessions'

    id = db.Column(db.Integer, primary_key=True)
    started_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    save_entries = db.relationship('SaveEntry', backref='session', lazy=True, cascade='all, delete-orphan')

    def to_dict(self):
        """Convert to dictionary."""
        return {
            'id': self.id,
            'started_at': self.started_at.isoformat(),
            'updated_at': self.updated_at.isoformat()
        }

class SaveEntry(db.Model):
    """One key of a session's save store (e.g. the v2 save record)."""
    __tablename__ = 'save_entries'
    __table_args__ = (db.UniqueConstraint('session_id', 'key', name='uq_save_entry_key'),)

    id = db.Column(db.Integer, primary_key=True)
    session_id = db.Column(db.Integer, db.ForeignKey('game_sessions.id'), nullable=False, index=True)
    key = db.Column(db.String(120), nullable=False)
    value = db.Column(db.Text, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def to_dict(self):
        """Convert to dictionary."""
        return {
            'id': self.id,
            'session_id': self.session_id,
            'key': self.key,
            'updated_at': self.updated_at.isoformat()
        }

class DatabaseStore:
    """Key-value save store backed by SaveEntry rows of one session."""

    def __init__(self, session_id):
        self.session_id = session_id

    def _entry(self, key):
        return SaveEntry.query.filter_by(session_id=self.session_id, key=key).first()

    def get_item(self, key):
        entry = self._entry(key)
        return entry.value if entry else None

    def set_item(self, key, value):
        try:
            entry = self._entry(key)
            if entry is None:
                db.session.add(SaveEntry(session_id=self.session_id, key=key, value=value))
            else:
                entry.value = value
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

    def remove_item(self, key):
        try:
            SaveEntry.query.filter_by(session_id=self.session_id, key=key).delete()
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise
