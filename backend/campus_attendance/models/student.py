"""Student profile linked to a login account."""
from campus_attendance import db
from campus_attendance.models.base import BaseModel


class Student(BaseModel):
    """Student record; attendance always points here, never at the user."""

    __tablename__ = 'students'

    # Link to User
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, unique=True)

    # Identity
    name = db.Column(db.String(255), nullable=False)
    student_code = db.Column(db.String(50), unique=True, nullable=True, index=True)
    roll_no = db.Column(db.String(50), nullable=True)
    class_name = db.Column('class', db.String(100), nullable=True, index=True)
    email = db.Column(db.String(255), nullable=False)

    # Relationships
    user = db.relationship('User', back_populates='student_profile')
    face = db.relationship('StudentFace', back_populates='student', uselist=False,
                           cascade='all, delete')

    @classmethod
    def get_by_user_id(cls, user_id: int) -> 'Student':
        return cls.query.filter_by(user_id=user_id).first()

    def summary(self) -> dict:
        """Short form used in attendance and face-match responses."""
        return {
            'id': self.id,
            'name': self.name,
            'student_id': self.student_code,
            'roll_no': self.roll_no,
            'class': self.class_name,
        }

    def to_dict(self):
        """Convert to dictionary."""
        return {
            'id': self.id,
            'user_id': self.user_id,
            'name': self.name,
            'student_id': self.student_code,
            'roll_no': self.roll_no,
            'class': self.class_name,
            'email': self.email,
            'face_registered': self.face is not None,
            'created_at': self.created_at.isoformat()
        }
