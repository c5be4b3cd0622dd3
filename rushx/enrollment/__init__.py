"""Enrollment blueprint."""

from flask import Blueprint

bp = Blueprint("enrollment", __name__, url_prefix="/tournaments")

from . import routes  # noqa: E402, F401
from .models import Enrollment, EnrollmentSubmission  # noqa: E402
from .services import EnrollmentService  # noqa: E402

__all__ = ["Enrollment", "EnrollmentService", "EnrollmentSubmission", "routes"]
