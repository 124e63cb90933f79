"""Camera attendance: face templates and AI-gateway face matching."""
import json
import logging
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional, Tuple

import requests
from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from campus_attendance import db
from campus_attendance.models.attendance import MarkedVia
from campus_attendance.models.student import Student
from campus_attendance.models.student_face import StudentFace
from campus_attendance.services.attendance_service import AttendanceService
from campus_attendance.utils.errors import (
    AttendanceError,
    ExternalServiceError,
    ServiceNotConfigured,
    StudentNotFound,
)
from campus_attendance.utils.helpers import utcnow

logger = logging.getLogger(__name__)

COMPARISON_PROMPT = """You are a face recognition system. Compare these two images and determine if they show the SAME person.

IMPORTANT INSTRUCTIONS:
1. Look at facial features: eyes, nose, mouth shape, face shape, skin tone
2. Account for slight differences in lighting, angle, and expression
3. Be reasonably confident but not overly strict
4. Respond with ONLY a JSON object in this exact format:
{"match": true, "confidence": 0.85}
or
{"match": false, "confidence": 0.2}

The "match" field should be true if the faces appear to be the same person.
The "confidence" field should be a number between 0 and 1 indicating your confidence.
A confidence above 0.7 with match=true indicates a reliable match.

RESPOND WITH ONLY THE JSON OBJECT, NO OTHER TEXT."""

_JSON_OBJECT = re.compile(r'\{[\s\S]*\}')


@dataclass
class FaceComparison:
    """Verdict of one pairwise comparison."""
    match: bool
    confidence: float


class FaceComparator:
    """Anything that can tell whether two face images show the same person."""

    def compare(self, image_a: str, image_b: str) -> FaceComparison:
        raise NotImplementedError


class GatewayFaceComparator(FaceComparator):
    """Delegates the comparison to a multimodal chat-completions endpoint."""

    def __init__(self, api_url: str, api_key: str, model: str, timeout: float = 30):
        self.api_url = api_url
        self.api_key = api_key
        self.model = model
        self.timeout = timeout

    @classmethod
    def from_config(cls, config) -> 'GatewayFaceComparator':
        api_key = config.get('AI_GATEWAY_API_KEY')
        if not api_key:
            logger.error("AI gateway API key not configured")
            raise ServiceNotConfigured('AI service not configured')
        return cls(
            api_url=config['AI_GATEWAY_URL'],
            api_key=api_key,
            model=config['AI_FACE_MODEL'],
            timeout=config.get('AI_REQUEST_TIMEOUT_SECONDS', 30)
        )

    def build_payload(self, image_a: str, image_b: str) -> Dict:
        return {
            'model': self.model,
            'messages': [
                {
                    'role': 'user',
                    'content': [
                        {'type': 'text', 'text': COMPARISON_PROMPT},
                        {'type': 'image_url', 'image_url': {'url': image_a}},
                        {'type': 'image_url', 'image_url': {'url': image_b}},
                    ]
                }
            ],
        }

    def compare(self, image_a: str, image_b: str) -> FaceComparison:
        try:
            response = requests.post(
                self.api_url,
                json=self.build_payload(image_a, image_b),
                headers={
                    'Authorization': f'Bearer {self.api_key}',
                    'Content-Type': 'application/json',
                },
                timeout=self.timeout
            )
        except requests.RequestException as e:
            raise ExternalServiceError(f"AI gateway unreachable: {e}")

        if not response.ok:
            raise ExternalServiceError(
                f"AI gateway returned {response.status_code}: {response.text[:200]}"
            )

        try:
            content = response.json()['choices'][0]['message']['content'] or ''
        except (ValueError, KeyError, IndexError, TypeError):
            raise ExternalServiceError("AI gateway returned an unexpected body")

        if not isinstance(content, str):
            raise ExternalServiceError("AI gateway returned an unexpected body")

        return self.parse_verdict(content)

    @staticmethod
    def parse_verdict(text: str) -> FaceComparison:
        """Pull the first {...} object out of the model's reply."""
        if not isinstance(text, str):
            raise ExternalServiceError("AI verdict is not text")
        found = _JSON_OBJECT.search(text)
        if not found:
            raise ExternalServiceError(f"No JSON verdict in AI response: {text[:200]!r}")

        try:
            verdict = json.loads(found.group(0))
            confidence = float(verdict.get('confidence', 0))
        except (ValueError, TypeError, AttributeError):
            raise ExternalServiceError(f"Unparsable AI verdict: {text[:200]!r}")

        return FaceComparison(match=verdict.get('match') is True, confidence=confidence)


class FaceMatchService:
    """Identify a captured face among registered students and mark them present.

    Candidates are scanned in registration order and the first one the model
    accepts at or above the threshold wins; later candidates are not tried.
    """

    def __init__(self, comparator: FaceComparator, threshold: float = 0.65):
        self.comparator = comparator
        self.threshold = threshold

    @classmethod
    def from_app_config(cls) -> 'FaceMatchService':
        comparator = current_app.extensions.get('face_comparator')
        if comparator is None:
            comparator = GatewayFaceComparator.from_config(current_app.config)
        return cls(comparator, threshold=current_app.config['FACE_MATCH_THRESHOLD'])

    # =================== TEMPLATES ===================

    @staticmethod
    def register_face(student_id: int, face_data: str) -> Tuple[StudentFace, bool]:
        """Insert or replace the student's reference image. Returns (face, created)."""
        student = Student.get_by_id(student_id)
        if student is None:
            raise StudentNotFound('Student not found')

        face = StudentFace.query.filter_by(student_id=student.id).first()
        created = face is None
        if created:
            face = StudentFace(student_id=student.id, face_data=face_data)
            db.session.add(face)
        else:
            face.face_data = face_data
            face.updated_at = utcnow()
        db.session.commit()

        logger.info("Face %s for student %s", 'registered' if created else 'replaced', student.id)
        return face, created

    @staticmethod
    def remove_face(student_id: int) -> None:
        face = StudentFace.query.filter_by(student_id=student_id).first()
        if face is None:
            raise StudentNotFound('No face registered for this student')
        face.delete()

    @staticmethod
    def candidates(class_filter: Optional[str] = None) -> List[StudentFace]:
        query = StudentFace.query.join(Student, StudentFace.student_id == Student.id)
        if class_filter:
            query = query.filter(Student.class_name == class_filter)
        return query.order_by(StudentFace.created_at, StudentFace.id).all()

    # =================== MATCHING ===================

    def is_accepted(self, comparison: FaceComparison) -> bool:
        return comparison.match is True and comparison.confidence >= self.threshold

    def find_match(
        self,
        captured_image: str,
        candidates: List[StudentFace]
    ) -> Optional[Tuple[StudentFace, FaceComparison]]:
        """First candidate the comparator accepts, or None.

        A failed comparison only skips that candidate.
        """
        for face in candidates:
            try:
                comparison = self.comparator.compare(captured_image, face.face_data)
            except ExternalServiceError as e:
                logger.warning("Face comparison failed for student %s: %s", face.student_id, e.message)
                continue

            if self.is_accepted(comparison):
                logger.info(
                    "Face matched student %s with confidence %.2f",
                    face.student_id, comparison.confidence
                )
                return face, comparison

            logger.debug(
                "No match for student %s (match=%s, confidence=%.2f)",
                face.student_id, comparison.match, comparison.confidence
            )
        return None

    def identify(
        self,
        captured_image: str,
        class_filter: Optional[str] = None,
        now: datetime = None
    ) -> Dict:
        """Run the scan and mark the recognised student in the daily ledger."""
        now = now or utcnow()

        all_faces = self.candidates()
        if not all_faces:
            return {'recognized': False, 'message': 'No registered faces found in the system'}

        faces = self.candidates(class_filter) if class_filter else all_faces
        if not faces:
            return {'recognized': False, 'message': 'No registered faces found for the selected class'}

        found = self.find_match(captured_image, faces)
        if found is None:
            logger.info("No face match after checking %d registered faces", len(faces))
            return {
                'recognized': False,
                'message': 'Face not recognized. Please try again or ensure your face is registered.'
            }

        face, comparison = found
        student = face.student

        try:
            entry, created = AttendanceService.mark_ledger_present(student, MarkedVia.CAMERA, now)
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception("Failed to mark camera attendance for student %s", student.id)
            raise AttendanceError(
                'Face recognized but failed to mark attendance',
                status_code=500,
                code='ATTENDANCE_WRITE_FAILED',
                extra={'recognized': True}
            )

        if not created:
            return {
                'recognized': True,
                'already_marked': True,
                'student': student.summary(),
                'message': f'Attendance already marked for {student.name} today'
            }

        return {
            'recognized': True,
            'attendance_marked': True,
            'student': student.summary(),
            'confidence': comparison.confidence,
            'time': entry.time.strftime('%H:%M:%S'),
            'message': f'Attendance marked for {student.name}'
        }
