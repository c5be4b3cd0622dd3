"""Blueprint for the referral program."""

from flask import Blueprint

bp = Blueprint("referral", __name__, url_prefix="/referral")

from . import routes  # noqa: E402, F401
from .models import ReferralCode, ReferralStats, ReferralValidation  # noqa: E402
from .services import ReferralService  # noqa: E402

__all__ = [
    "ReferralCode",
    "ReferralService",
    "ReferralStats",
    "ReferralValidation",
    "routes",
]
