"""Forms for the payment blueprint."""

from wtforms import FloatField, StringField
from wtforms.validators import (
    DataRequired,
    InputRequired,
    Length,
    NumberRange,
    Optional,
    Regexp,
)

from arenaclash.core.forms import JSONForm

ORDER_ID_PATTERN = r"^[A-Za-z0-9_-]+$"


class TopupForm(JSONForm):
    """Form for starting a wallet top-up."""

    amount = FloatField(
        "Amount",
        validators=[
            InputRequired(message="Please enter an amount."),
            NumberRange(min=1, message="Amount must be at least ₹1."),
        ],
    )
    orderId = StringField(
        "Order ID",
        validators=[Optional(), Length(max=40), Regexp(ORDER_ID_PATTERN)],
    )
    customerMobile = StringField(
        "Mobile",
        validators=[
            Optional(),
            Regexp(r"^\d{10}$", message="Enter a 10 digit mobile number."),
        ],
    )


class StatusForm(JSONForm):
    """Form for polling a top-up's status."""

    orderId = StringField(
        "Order ID",
        validators=[DataRequired(), Length(max=40), Regexp(ORDER_ID_PATTERN)],
    )
