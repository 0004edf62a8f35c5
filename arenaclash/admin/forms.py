"""Forms for the admin blueprint."""

from wtforms import FloatField, StringField
from wtforms.validators import DataRequired, InputRequired

from arenaclash.core.forms import JSONForm


class BalanceAdjustForm(JSONForm):
    """A signed amount: positive credits, negative debits."""

    amount = FloatField(
        "Amount", validators=[InputRequired(message="Amount must not be zero.")]
    )


class GamemodeRemoveForm(JSONForm):
    name = StringField("Gamemode", validators=[DataRequired()])
