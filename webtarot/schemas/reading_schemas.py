"""Reading and interpretation request schemas."""
from datetime import datetime, timezone
from marshmallow import EXCLUDE, Schema, ValidationError, fields, post_load, validate

from webtarot.domain.card import Card
from webtarot.domain.deck import DECK_SIZE, MAX_DRAWS
from webtarot.models.enums import InterpretationBackend

MAX_QUESTION_LENGTH = 2000
MAX_CONTEXT_LENGTH = 4000


class CardField(fields.Field):
    """A card in its tagged wire form."""

    def _serialize(self, value, attr, obj, **kwargs):
        if value is None:
            return None
        return value.to_dict()

    def _deserialize(self, value, attr, data, **kwargs):
        try:
            return Card.from_dict(value)
        except (ValueError, TypeError, AttributeError) as e:
            raise ValidationError(f"Invalid card: {e}")


class LenientDateTime(fields.Field):
    """RFC3339 timestamp; unparseable values load as None."""

    def _deserialize(self, value, attr, data, **kwargs):
        if not isinstance(value, str) or not value.strip():
            return None
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed


class CreateReadingRequestSchema(Schema):
    """Schema for POST /reading."""

    class Meta:
        unknown = EXCLUDE

    question = fields.Str(
        required=True, validate=validate.Length(min=1, max=MAX_QUESTION_LENGTH)
    )
    cards = fields.Int(required=True, validate=validate.Range(min=1, max=MAX_DRAWS))
    context = fields.Str(
        load_default="", validate=validate.Length(max=MAX_CONTEXT_LENGTH)
    )
    backend = fields.Str(
        load_default=None,
        allow_none=True,
        validate=validate.OneOf([b.value for b in InterpretationBackend]),
    )

    @post_load
    def to_backend_enum(self, data, **kwargs):
        if data.get("backend"):
            data["backend"] = InterpretationBackend(data["backend"])
        return data


class CreateInterpretationRequestSchema(Schema):
    """Schema for POST /interpretation (client-drawn cards)."""

    class Meta:
        unknown = EXCLUDE

    question = fields.Str(
        required=True, validate=validate.Length(min=1, max=MAX_QUESTION_LENGTH)
    )
    cards = fields.List(
        CardField(), required=True, validate=validate.Length(min=1, max=DECK_SIZE)
    )
    context = fields.Str(
        load_default="", validate=validate.Length(max=MAX_CONTEXT_LENGTH)
    )


class HistoryQuerySchema(Schema):
    """Query string of GET /interpretation/history."""

    class Meta:
        unknown = EXCLUDE

    before = LenientDateTime(load_default=None)
    limit = fields.Int(load_default=None)


class CreateReadingResponseSchema(Schema):
    """Response of POST /reading."""

    shuffled_times = fields.Int(data_key="shuffledTimes")
    cards = fields.List(CardField())
    interpretation_id = fields.Function(
        lambda reading: str(reading.id), data_key="interpretationId"
    )
