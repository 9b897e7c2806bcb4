from massage_api.extensions import db


class Employee(db.Model):
    __tablename__ = "employees"

    # internal surrogate key; the public identity is `name`
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False, unique=True)
    position = db.Column(db.String(120), nullable=False)
