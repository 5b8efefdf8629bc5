"""Shopping list models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, computed_field


def format_amount(amount: float) -> str:
    """Render an aggregated amount the way the shopping list shows it."""

    if amount >= 1000:
        return f"{amount / 1000:.1f}k"
    if float(amount).is_integer():
        return str(int(amount))
    return f"{amount:.1f}"


class ShoppingItem(BaseModel):
    """Aggregated ingredient entry derived from one or more day plans."""

    name: str
    amount: float = Field(ge=0)
    unit: str
    category: str
    checked: bool = Field(default=False)

    model_config = ConfigDict(frozen=True)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def display_amount(self) -> str:
        return format_amount(self.amount)


__all__ = ["ShoppingItem", "format_amount"]
