"""Forms for the teams blueprint."""

from flask_wtf import FlaskForm
from wtforms import SelectField, StringField, TextAreaField
from wtforms.validators import DataRequired, Length, Optional

from rushx.core.constants import (
    PRIVACY_CLOSED,
    PRIVACY_OPEN,
    TEAM_DESCRIPTION_MAX_LENGTH,
    TEAM_NAME_MAX_LENGTH,
)


class TeamForm(FlaskForm):
    """Form to create or edit a team."""

    team_name = StringField(
        "Team Name", validators=[DataRequired(), Length(max=TEAM_NAME_MAX_LENGTH)]
    )
    # Longer tags are cut down to size rather than rejected.
    team_tag = StringField("Team Tag", validators=[DataRequired(), Length(max=16)])
    team_description = TextAreaField(
        "Description",
        validators=[Optional(), Length(max=TEAM_DESCRIPTION_MAX_LENGTH)],
    )
    team_logo = StringField("Logo URL", validators=[Optional(), Length(max=500)])
    privacy = SelectField(
        "Privacy",
        choices=[(PRIVACY_OPEN, "Open"), (PRIVACY_CLOSED, "Closed")],
        default=PRIVACY_OPEN,
    )
