"""Swagger/OpenAPI configuration for the application."""
from campus_attendance import __version__

# Swagger UI configuration
SWAGGER_URL = '/api/docs'
API_URL = '/api/swagger.json'


def get_swagger_blueprint():
    """Create and return swagger UI blueprint."""
    from flask_swagger_ui import get_swaggerui_blueprint

    swaggerui_blueprint = get_swaggerui_blueprint(
        SWAGGER_URL,
        API_URL,
        config={
            'app_name': "Campus Attendance Service API",
            'defaultModelsExpandDepth': -1,
            'defaultModelExpandDepth': 1,
            'docExpansion': 'list',
            'filter': True,
            'supportedSubmitMethods': ['get', 'post', 'put', 'delete'],
            'validatorUrl': None,
        }
    )
    return swaggerui_blueprint


def _json_body(properties, required=None):
    schema = {"type": "object", "properties": properties}
    if required:
        schema["required"] = required
    return {
        "required": True,
        "content": {"application/json": {"schema": schema}}
    }


def _responses(success, **errors):
    responses = {
        "200": {
            "description": success,
            "content": {"application/json": {"schema": {"$ref": "#/components/schemas/Success"}}}
        }
    }
    for status, description in errors.items():
        responses[status.lstrip('_')] = {
            "description": description,
            "content": {"application/json": {"schema": {"$ref": "#/components/schemas/Error"}}}
        }
    return responses


def _secured(tag, summary, responses, request_body=None, parameters=None):
    operation = {
        "tags": [tag],
        "summary": summary,
        "security": [{"bearerAuth": []}],
        "responses": responses
    }
    if request_body:
        operation["requestBody"] = request_body
    if parameters:
        operation["parameters"] = parameters
    return operation


def _path_id(name):
    return [{"name": name, "in": "path", "required": True, "schema": {"type": "integer"}}]


def _query(*names):
    return [{"name": name, "in": "query", "required": False, "schema": {"type": "string"}}
            for name in names]


def generate_swagger_spec():
    """Generate OpenAPI/Swagger specification."""
    return {
        "openapi": "3.0.0",
        "info": {
            "title": "Campus Attendance Service API",
            "description": "Time-boxed attendance sessions verified by GPS geofence or campus WiFi, "
                           "plus camera attendance through face matching",
            "version": __version__
        },
        "servers": [
            {
                "url": "http://127.0.0.1:5000/api",
                "description": "Development server"
            }
        ],
        "components": {
            "securitySchemes": {
                "bearerAuth": {
                    "type": "http",
                    "scheme": "bearer",
                    "bearerFormat": "JWT"
                }
            },
            "schemas": {
                "Error": {
                    "type": "object",
                    "properties": {
                        "error": {"type": "boolean"},
                        "message": {"type": "string"},
                        "status_code": {"type": "integer"},
                        "code": {"type": "string"}
                    }
                },
                "Success": {
                    "type": "object",
                    "properties": {
                        "error": {"type": "boolean", "default": False},
                        "message": {"type": "string"},
                        "data": {"type": "object"}
                    }
                }
            }
        },
        "paths": {
            "/auth/login": {
                "post": {
                    "tags": ["Authentication"],
                    "summary": "User login",
                    "requestBody": _json_body({
                        "email": {"type": "string", "format": "email"},
                        "password": {"type": "string"}
                    }, ["email", "password"]),
                    "responses": _responses("Login successful", _400="Validation error",
                                            _401="Invalid credentials", _429="Too many attempts")
                }
            },
            "/auth/refresh": {
                "post": _secured("Authentication", "Refresh access token",
                                 _responses("New access token", _401="Invalid refresh token"))
            },
            "/auth/me": {
                "get": _secured("Authentication", "Current user profile",
                                _responses("Profile", _401="Unauthorized"))
            },
            "/admin/students/": {
                "get": _secured("Students", "List students",
                                _responses("Students", _403="Admin access required"),
                                parameters=_query("class")),
                "post": _secured("Students", "Create student account",
                                 _responses("Account created with temporary password",
                                            _400="Validation error", _403="Admin access required"),
                                 request_body=_json_body({
                                     "email": {"type": "string", "format": "email"},
                                     "full_name": {"type": "string"},
                                     "student_id": {"type": "string"},
                                     "roll_no": {"type": "string"},
                                     "class": {"type": "string"}
                                 }, ["email", "full_name"]))
            },
            "/admin/students/{student_id}": {
                "delete": _secured("Students", "Delete student and related data",
                                   _responses("Deleted", _404="Student not found"),
                                   parameters=_path_id("student_id"))
            },
            "/campus/settings": {
                "get": _secured("Campus", "Campus settings",
                                _responses("Settings", _404="Not configured")),
                "put": _secured("Campus", "Update campus settings",
                                _responses("Updated", _400="Validation error",
                                           _403="Admin access required"),
                                request_body=_json_body({
                                    "campus_name": {"type": "string"},
                                    "latitude": {"type": "number"},
                                    "longitude": {"type": "number"},
                                    "allowed_radius_meters": {"type": "integer", "minimum": 1},
                                    "campus_ip": {"type": "string", "nullable": True},
                                    "campus_ip_range": {"type": "string", "nullable": True},
                                    "gps_verification_enabled": {"type": "boolean"},
                                    "wifi_verification_enabled": {"type": "boolean"}
                                }))
            },
            "/sessions/": {
                "get": _secured("Sessions", "List sessions (expired ones are closed)",
                                _responses("Sessions", _403="Admin access required")),
                "post": _secured("Sessions", "Start attendance session",
                                 _responses("Session started", _400="Validation error",
                                            _403="Admin access required"),
                                 request_body=_json_body({
                                     "course": {"type": "string"},
                                     "subject": {"type": "string"},
                                     "batch": {"type": "string"},
                                     "duration_minutes": {"type": "integer", "minimum": 1,
                                                          "maximum": 240, "default": 10},
                                     "gps_required": {"type": "boolean"},
                                     "wifi_required": {"type": "boolean"}
                                 }, ["course", "subject", "batch"]))
            },
            "/sessions/current": {
                "get": _secured("Sessions", "Currently open session",
                                _responses("Current session or null", _401="Unauthorized"))
            },
            "/sessions/{session_id}": {
                "get": _secured("Sessions", "Get session",
                                _responses("Session", _404="Session not found"),
                                parameters=_path_id("session_id"))
            },
            "/sessions/{session_id}/close": {
                "post": _secured("Sessions", "Close session",
                                 _responses("Session closed", _404="Session not found"),
                                 parameters=_path_id("session_id"))
            },
            "/sessions/{session_id}/records": {
                "get": _secured("Sessions", "Records marked in a session",
                                _responses("Records", _404="Session not found"),
                                parameters=_path_id("session_id"))
            },
            "/attendance/smart": {
                "post": _secured("Attendance", "Mark smart attendance",
                                 _responses("Marked or already marked",
                                            _400="Validation error or session expired",
                                            _403="Verification failed",
                                            _404="Session or student not found"),
                                 request_body=_json_body({
                                     "session_id": {"type": "integer"},
                                     "latitude": {"type": "number"},
                                     "longitude": {"type": "number"},
                                     "device_info": {"type": "string"}
                                 }, ["session_id"]))
            },
            "/attendance/my-records": {
                "get": _secured("Attendance", "Calling student's daily attendance",
                                _responses("Records", _403="Student access required"),
                                parameters=_query("from_date", "to_date"))
            },
            "/attendance/": {
                "get": _secured("Attendance", "Daily attendance ledger",
                                _responses("Records", _403="Admin access required"),
                                parameters=_query("date", "class"))
            },
            "/faces/": {
                "get": _secured("Faces", "Registered faces",
                                _responses("Faces", _403="Admin access required"))
            },
            "/faces/register": {
                "post": _secured("Faces", "Register or replace a face template",
                                 _responses("Registered", _400="Invalid image",
                                            _404="Student not found"),
                                 request_body=_json_body({
                                     "student_id": {"type": "integer"},
                                     "face_data": {"type": "string",
                                                   "description": "data:image/... base64 URL"}
                                 }, ["student_id", "face_data"]))
            },
            "/faces/verify": {
                "post": _secured("Faces", "Identify a captured face and mark attendance",
                                 _responses("Recognition result", _400="Invalid image",
                                            _503="AI service not configured"),
                                 request_body=_json_body({
                                     "captured_face": {"type": "string"},
                                     "class_filter": {"type": "string"}
                                 }, ["captured_face"]))
            },
            "/faces/{student_id}": {
                "delete": _secured("Faces", "Remove a face template",
                                   _responses("Removed", _404="No face registered"),
                                   parameters=_path_id("student_id"))
            }
        }
    }
