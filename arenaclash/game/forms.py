"""Forms for the game blueprint."""

from wtforms import FloatField, StringField, TextAreaField
from wtforms.validators import DataRequired, Length, NumberRange, Optional, URL

from arenaclash.core.forms import JSONForm


class GameForm(JSONForm):
    """Form for adding a game."""

    name = StringField("Game Name", validators=[DataRequired(), Length(max=60)])


class GameDetailsForm(JSONForm):
    """Form for editing a game's details and default settings."""

    name = StringField("Name", validators=[DataRequired(), Length(max=60)])
    coverImage = StringField("Cover Image", validators=[Optional(), URL()])
    description = TextAreaField("Description", validators=[Optional()])
    rules = TextAreaField("Rules", validators=[Optional()])
    discord = StringField("Discord", validators=[Optional(), URL()])
    website = StringField("Website", validators=[Optional(), URL()])
    minEntryFee = FloatField(
        "Min Entry Fee", default=0, validators=[Optional(), NumberRange(min=0)]
    )
    maxEntryFee = FloatField(
        "Max Entry Fee", default=0, validators=[Optional(), NumberRange(min=0)]
    )
    perKillBonus = FloatField(
        "Per Kill Bonus", default=0, validators=[Optional(), NumberRange(min=0)]
    )


class GamemodeForm(JSONForm):
    """Form for adding a gamemode (map or mode) to a game."""

    name = StringField("Gamemode", validators=[DataRequired(), Length(max=40)])
