from locapilot.extensions import db
from locapilot.models.base import SerializerMixin, utcnow


class AppSetting(SerializerMixin, db.Model):
    __tablename__ = "settings"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    key = db.Column(db.String(191), nullable=False)
    value = db.Column(db.JSON, nullable=True)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    def __repr__(self):
        return f"<AppSetting {self.key}={self.value}>"
