from sqlalchemy import event
from models import Voter


@event.listens_for(Voter, 'before_insert')
def normalize_email_on_insert(mapper, connection, target):
    """Store voter emails trimmed and lowercased so lookups are case-insensitive."""
    if target.email:
        target.email = target.email.strip().lower()


@event.listens_for(Voter, 'before_update')
def normalize_email_on_update(mapper, connection, target):
    if target.email:
        target.email = target.email.strip().lower()
