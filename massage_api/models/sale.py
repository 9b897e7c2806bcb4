from massage_api.extensions import db

REPR_NATIVE = "native"
REPR_EPOCH = "epoch"


class SalesRecord(db.Model):
    """
    A day's takings.

    occurred-at is a tagged variant:
      occurred_repr = 'native' -> occurred_at (naive UTC DateTime)
      occurred_repr = 'epoch'  -> occurred_epoch_seconds + occurred_nanos (legacy import format)
    Use services.dates.normalize() to read it; never compare the raw columns.
    """

    __tablename__ = "sales_records"

    id = db.Column(db.Integer, primary_key=True)
    occurred_repr = db.Column(db.String(10), nullable=False, default=REPR_NATIVE)
    occurred_at = db.Column(db.DateTime, nullable=True, index=True)
    occurred_epoch_seconds = db.Column(db.BigInteger, nullable=True, index=True)
    occurred_nanos = db.Column(db.Integer, nullable=True)

    staff_oil = db.Column(db.Float, nullable=True)
    customers = db.Column(db.Float, nullable=True)
    income = db.Column(db.Float, nullable=True)
    commission = db.Column(db.Float, nullable=True)
    extra_commission = db.Column(db.Float, nullable=True)
    expense = db.Column(db.Float, nullable=True)
    credit_card = db.Column(db.Float, nullable=True)
    cash = db.Column(db.Float, nullable=True)
    time_work = db.Column(db.String(120), nullable=True)

    __table_args__ = (
        db.CheckConstraint("occurred_repr IN ('native', 'epoch')", name="ck_sales_occurred_repr"),
    )
