"""Forms for the user blueprint."""

from wtforms import StringField
from wtforms.validators import DataRequired, Length, Regexp

from arenaclash.core.constants import MIN_USERNAME_LENGTH
from arenaclash.core.forms import JSONForm


class OnboardingForm(JSONForm):
    """Form for completing the first-login profile."""

    username = StringField(
        "Username",
        validators=[
            DataRequired(),
            Length(
                min=MIN_USERNAME_LENGTH,
                max=30,
                message="Username must be at least 3 characters",
            ),
            Regexp(
                r"^[A-Za-z0-9_]+$",
                message="Only letters, numbers and underscores are allowed.",
            ),
        ],
    )
    favoriteGame = StringField(
        "Favorite Game",
        validators=[DataRequired(message="Please select a favorite game")],
    )


class SettingsForm(JSONForm):
    """Form for updating profile settings."""

    displayName = StringField(
        "Display Name", validators=[DataRequired(), Length(max=50)]
    )
