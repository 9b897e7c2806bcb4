from massage_api.extensions import db


class ShiftDefinition(db.Model):
    __tablename__ = "shift_definitions"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(60), nullable=False)
    description = db.Column(db.String(255), nullable=True)
    active = db.Column(db.Boolean, nullable=False, default=True)
    order = db.Column("sort_order", db.Integer, nullable=False, default=0, index=True)
