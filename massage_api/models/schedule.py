from datetime import datetime, timezone

from massage_api.extensions import db


def _utcnow():
    return datetime.now(timezone.utc).replace(tzinfo=None)


class MonthlySchedule(db.Model):
    """
    One roster per (year, month).

    roster_grid / summary are opaque client-owned arrays, stored as JSON so the
    row behaves like a document.
    """

    __tablename__ = "monthly_schedules"

    id = db.Column(db.Integer, primary_key=True)
    year = db.Column(db.Integer, nullable=False)
    month = db.Column(db.SmallInteger, nullable=False)
    roster_grid = db.Column(db.JSON, nullable=False, default=list)
    summary = db.Column(db.JSON, nullable=False, default=list)
    created_at = db.Column(db.DateTime, nullable=False, default=_utcnow)
    updated_at = db.Column(db.DateTime, nullable=True, onupdate=_utcnow)

    __table_args__ = (
        db.Index("ux_schedule_year_month", "year", "month", unique=True),
        db.CheckConstraint("month BETWEEN 1 AND 12", name="ck_schedule_month"),
    )
