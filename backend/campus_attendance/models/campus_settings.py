"""Campus geofence and network configuration (singleton row)."""
from campus_attendance import db
from campus_attendance.models.base import BaseModel


class CampusSettings(BaseModel):
    """Reference point, radius and network origin used to verify presence."""

    __tablename__ = 'campus_settings'

    campus_name = db.Column(db.String(255), nullable=False, default='Main Campus')

    # Geofence
    latitude = db.Column(db.Float, nullable=False, default=0)
    longitude = db.Column(db.Float, nullable=False, default=0)
    allowed_radius_meters = db.Column(db.Integer, nullable=False, default=200)

    # Network origin: exact public IP and an optional plain string prefix
    campus_ip = db.Column(db.String(64), nullable=True)
    campus_ip_range = db.Column(db.String(64), nullable=True)

    # Defaults copied onto new sessions
    gps_verification_enabled = db.Column(db.Boolean, nullable=False, default=True)
    wifi_verification_enabled = db.Column(db.Boolean, nullable=False, default=True)

    updated_by = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)

    @classmethod
    def get_current(cls) -> 'CampusSettings':
        """Return the settings row, or None before bootstrap."""
        return cls.query.order_by(cls.id).first()

    @classmethod
    def get_or_create(cls) -> 'CampusSettings':
        settings = cls.get_current()
        if settings is None:
            settings = cls(campus_name='Main Campus').save()
        return settings
