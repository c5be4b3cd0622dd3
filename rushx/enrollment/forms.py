"""Forms for the enrollment blueprint."""

from flask_wtf import FlaskForm
from wtforms import StringField, TextAreaField
from wtforms.validators import DataRequired, Length, Optional


class EnrollmentForm(FlaskForm):
    """Registration details plus the UPI transaction reference."""

    in_game_nickname = StringField(
        "In-game Nickname", validators=[DataRequired(), Length(max=64)]
    )
    game_uid = StringField("Game UID", validators=[DataRequired(), Length(max=64)])
    mobile_number = StringField(
        "Mobile Number", validators=[DataRequired(), Length(max=20)]
    )
    address = TextAreaField("Address", validators=[DataRequired(), Length(max=500)])
    transaction_id = StringField(
        "Transaction ID", validators=[DataRequired(), Length(max=128)]
    )
    referral_code = StringField("Referral Code", validators=[Optional(), Length(max=16)])
