from massage_api.extensions import db


class Holiday(db.Model):
    __tablename__ = "holidays"

    id = db.Column(db.Integer, primary_key=True)
    date = db.Column(db.String(10), nullable=False, unique=True)  # YYYY-MM-DD
    th = db.Column(db.String(255), nullable=True)
    en = db.Column(db.String(255), nullable=True)
