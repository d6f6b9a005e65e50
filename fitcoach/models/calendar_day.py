from fitcoach import db


class CalendarDay(db.Model):
    """One row per date that has ever been written to.

    Every booking and block write bumps ``revision`` first, so writers for
    the same date queue up behind each other.
    """
    __tablename__ = "calendar_days"

    date = db.Column(db.String(10), primary_key=True)
    revision = db.Column(db.Integer, nullable=False, default=0)
