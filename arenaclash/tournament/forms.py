"""Forms for the tournament blueprint."""

from wtforms import FloatField, IntegerField, SelectField, StringField
from wtforms.validators import (
    DataRequired,
    InputRequired,
    Length,
    NumberRange,
    Optional,
    Regexp,
)

from arenaclash.core.constants import TOURNAMENT_STATUSES, TOURNAMENT_TYPES
from arenaclash.core.forms import JSONForm


class TournamentForm(JSONForm):
    """Form for creating/editing a tournament."""

    game = StringField("Game", validators=[DataRequired()])

    title = StringField("Title", validators=[DataRequired(), Length(max=100)])

    map = StringField("Map", validators=[Optional(), Length(max=50)])

    entryFee = FloatField(
        "Entry Fee", default=0, validators=[Optional(), NumberRange(min=0)]
    )

    prizePool = FloatField(
        "Prize Pool", default=0, validators=[Optional(), NumberRange(min=0)]
    )

    perKill = FloatField("Per Kill", validators=[Optional(), NumberRange(min=0)])

    date = StringField(
        "Date",
        validators=[
            DataRequired(),
            Regexp(r"^\d{4}-\d{2}-\d{2}$", message="Use the YYYY-MM-DD format."),
        ],
    )

    time = StringField(
        "Time",
        validators=[
            DataRequired(),
            Regexp(r"^\d{2}:\d{2}$", message="Use the HH:MM format."),
        ],
    )

    maxPlayers = IntegerField(
        "Max Players", default=100, validators=[Optional(), NumberRange(min=1)]
    )

    type = SelectField(
        "Type",
        choices=[(t, t.title()) for t in TOURNAMENT_TYPES],
        default=TOURNAMENT_TYPES[0],
        validators=[Optional()],
    )

    roomId = StringField("Room ID", validators=[Optional(), Length(max=50)])

    roomPassword = StringField(
        "Room Password", validators=[Optional(), Length(max=50)]
    )


class JoinTournamentForm(JSONForm):
    """Form for joining a tournament."""

    ingameName = StringField(
        "In-game Name",
        validators=[
            DataRequired(message="Please enter your in-game name."),
            Length(max=40),
        ],
    )

    entryFee = FloatField("Entry Fee", validators=[Optional(), NumberRange(min=0)])


class TournamentStatusForm(JSONForm):
    """Form for moving a tournament between upcoming, live and completed."""

    status = SelectField(
        "Status",
        choices=[(s, s.title()) for s in TOURNAMENT_STATUSES],
        validators=[InputRequired()],
    )


class RoomDetailsForm(JSONForm):
    """Form for publishing room credentials to participants."""

    roomId = StringField("Room ID", validators=[DataRequired(), Length(max=50)])

    roomPassword = StringField(
        "Room Password", validators=[DataRequired(), Length(max=50)]
    )
