from typing import Annotated, ClassVar

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, model_validator
from pydantic.alias_generators import to_camel

from ..money import parse_currency, to_kwd


class ApiModel(BaseModel):
    """
    Base for every wire model: snake_case in Python, camelCase on the wire.

    ``money_fields`` maps a KWD string field to the ``*_fils`` column it is
    rendered from, so database rows can be returned as-is.
    """

    money_fields: ClassVar[dict[str, str]] = {}

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    @model_validator(mode="before")
    @classmethod
    def _render_money(cls, data):
        if not cls.money_fields or not isinstance(data, dict):
            return data
        data = dict(data)
        for field, column in cls.money_fields.items():
            if column in data and field not in data:
                data[field] = None if data[column] is None else to_kwd(data[column])
        return data


def _as_text(value):
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


def _check_amount(value: str) -> str:
    try:
        fils = parse_currency(value)
    except ValueError as exc:
        raise ValueError("must be a decimal amount") from exc
    if fils < 0:
        raise ValueError("must not be negative")
    return to_kwd(fils)


# A non-negative KWD amount ("42.75", 42.75 or "KD 42.750"), normalized to "42.750"
KwdAmount = Annotated[str, BeforeValidator(_as_text), AfterValidator(_check_amount)]


def reject_null(value):
    """PATCH fields backed by NOT NULL columns may be omitted but not cleared."""
    if value is None:
        raise ValueError("must not be null")
    return value
