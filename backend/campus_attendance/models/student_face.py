"""Reference face image for camera-based attendance."""
from campus_attendance import db
from campus_attendance.models.base import BaseModel


class StudentFace(BaseModel):
    """Single reference image per student, replaced on re-registration."""

    __tablename__ = 'student_faces'

    student_id = db.Column(db.Integer, db.ForeignKey('students.id'), nullable=False, unique=True)
    face_data = db.Column(db.Text, nullable=False)  # data:image/...;base64,...

    student = db.relationship('Student', back_populates='face')

    def to_dict(self):
        # face_data omitted
        return {
            'id': self.id,
            'student_id': self.student_id,
            'registered_at': self.created_at.isoformat(),
            'updated_at': self.updated_at.isoformat(),
        }
