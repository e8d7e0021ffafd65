from __future__ import annotations

import json
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

from .errors import ConfigurationError
from .logging import get_logger
from .money import ZERO, to_decimal

logger = get_logger(__name__)

BRACKET_TOLERANCE = Decimal("0.01")

WORKING_DAYS_RANGE = (15, 31)
WORKING_HOURS_RANGE = (Decimal("1"), Decimal("24"))
OVERTIME_MULTIPLIER_RANGE = (Decimal("1"), Decimal("3"))

# Settings records written by the admin UI use the statutory scheme names.
MAPPING_ALIASES = {
    "napsa_rate": "contribution_rate",
    "napsa_maximum": "contribution_cap",
    "nhis_rate": "health_levy_rate",
    "paye_bands": "brackets",
    "overtime_rate_multiplier": "overtime_multiplier",
}

BRACKET_ROW_ALIASES = {
    "min": "lower_bound",
    "max": "upper_bound",
}

# Company settings fields that play no part in the calculation.
IGNORED_SETTINGS_FIELDS = frozenset(
    {
        "id",
        "company_name",
        "registration_number",
        "tax_number",
        "address",
        "city",
        "province",
        "country",
        "phone",
        "email",
        "website",
        "logo_url",
        "primary_color",
        "secondary_color",
        "accent_color",
        "nihma_rate",
        "late_arrival_threshold",
        "annual_leave_days",
        "sick_leave_days",
        "maternity_leave_days",
        "paternity_leave_days",
        "payslip_template",
        "payslip_footer",
        "include_qr_code",
        "currency_symbol",
        "date_format",
        "time_format",
        "timezone",
        "smtp_host",
        "smtp_port",
        "smtp_username",
        "smtp_password",
        "from_email",
        "from_name",
        "email_notifications",
        "sms_notifications",
        "leave_reminder_days",
        "created_at",
        "updated_at",
    }
)


@dataclass(frozen=True)
class TaxBracket:
    lower_bound: Decimal
    upper_bound: Optional[Decimal]
    rate: Decimal

    def __post_init__(self) -> None:
        object.__setattr__(self, "lower_bound", to_decimal(self.lower_bound))
        if self.upper_bound is not None:
            object.__setattr__(self, "upper_bound", to_decimal(self.upper_bound))
        object.__setattr__(self, "rate", to_decimal(self.rate))

    @property
    def is_unbounded(self) -> bool:
        return self.upper_bound is None

    @property
    def width(self) -> Optional[Decimal]:
        if self.upper_bound is None:
            return None
        return self.upper_bound - self.lower_bound


def _check_rate(name: str, rate: Decimal) -> None:
    if not rate.is_finite() or rate < ZERO or rate > 1:
        raise ConfigurationError(f"{name} must be between 0 and 1, got {rate}")


def validate_brackets(brackets: Sequence[TaxBracket]) -> None:
    if not brackets:
        raise ConfigurationError("At least one tax bracket is required")
    if brackets[0].lower_bound != ZERO:
        raise ConfigurationError(f"First tax bracket must start at 0, got {brackets[0].lower_bound}")

    previous: Optional[TaxBracket] = None
    for index, bracket in enumerate(brackets):
        _check_rate(f"Tax bracket {index} rate", bracket.rate)
        if previous is not None:
            if previous.upper_bound is None:
                raise ConfigurationError(f"Tax bracket {index - 1} is unbounded but is not the last bracket")
            if abs(bracket.lower_bound - previous.upper_bound) > BRACKET_TOLERANCE:
                raise ConfigurationError(
                    f"Tax bracket {index} starts at {bracket.lower_bound}, "
                    f"expected {previous.upper_bound} (brackets must be contiguous)"
                )
        if bracket.upper_bound is not None and bracket.upper_bound <= bracket.lower_bound:
            raise ConfigurationError(
                f"Tax bracket {index} upper bound {bracket.upper_bound} must exceed lower bound {bracket.lower_bound}"
            )
        previous = bracket

    if not brackets[-1].is_unbounded:
        raise ConfigurationError("Last tax bracket must be unbounded")


def _bracket_from_row(index: int, row: Any) -> TaxBracket:
    if not isinstance(row, Mapping):
        raise ConfigurationError(f"Malformed tax bracket row {index}: {row!r}")
    fields: Dict[str, Any] = {}
    for key, value in row.items():
        field_name = BRACKET_ROW_ALIASES.get(key, key)
        if field_name not in ("lower_bound", "upper_bound", "rate"):
            raise ConfigurationError(f"Unknown field '{key}' in tax bracket row {index}")
        if field_name in fields:
            raise ConfigurationError(f"Tax bracket row {index} sets '{field_name}' twice")
        fields[field_name] = value
    missing = [name for name in ("lower_bound", "rate") if fields.get(name) is None]
    if missing:
        raise ConfigurationError(f"Tax bracket row {index} is missing {', '.join(missing)}")
    try:
        return TaxBracket(
            lower_bound=fields["lower_bound"],
            upper_bound=fields.get("upper_bound"),
            rate=fields["rate"],
        )
    except ValueError as exc:
        raise ConfigurationError(f"Malformed tax bracket row {index}: {exc}") from exc


@dataclass(frozen=True)
class TaxConfiguration:
    """Immutable snapshot of the statutory rates used by one calculation."""

    contribution_rate: Decimal
    contribution_cap: Decimal
    health_levy_rate: Decimal
    brackets: Tuple[TaxBracket, ...]
    working_days_per_month: int = 22
    working_hours_per_day: Decimal = Decimal("8")
    overtime_multiplier: Decimal = Decimal("1.5")

    def __post_init__(self) -> None:
        try:
            object.__setattr__(self, "contribution_rate", to_decimal(self.contribution_rate))
            object.__setattr__(self, "contribution_cap", to_decimal(self.contribution_cap))
            object.__setattr__(self, "health_levy_rate", to_decimal(self.health_levy_rate))
            object.__setattr__(self, "working_hours_per_day", to_decimal(self.working_hours_per_day))
            object.__setattr__(self, "overtime_multiplier", to_decimal(self.overtime_multiplier))
            object.__setattr__(self, "brackets", tuple(self.brackets))
        except ValueError as exc:
            raise ConfigurationError(str(exc)) from exc
        self.validate()

    def validate(self) -> None:
        _check_rate("Contribution rate", self.contribution_rate)
        _check_rate("Health levy rate", self.health_levy_rate)
        if not self.contribution_cap.is_finite() or self.contribution_cap < ZERO:
            raise ConfigurationError(f"Contribution cap must be a non-negative amount, got {self.contribution_cap}")

        low_days, high_days = WORKING_DAYS_RANGE
        if isinstance(self.working_days_per_month, bool) or not isinstance(self.working_days_per_month, int):
            raise ConfigurationError("Working days per month must be an integer")
        if not low_days <= self.working_days_per_month <= high_days:
            raise ConfigurationError(f"Working days per month must be between {low_days} and {high_days}")

        low_hours, high_hours = WORKING_HOURS_RANGE
        if not self.working_hours_per_day.is_finite() or not low_hours <= self.working_hours_per_day <= high_hours:
            raise ConfigurationError(f"Working hours per day must be between {low_hours} and {high_hours}")

        low_mult, high_mult = OVERTIME_MULTIPLIER_RANGE
        if not self.overtime_multiplier.is_finite() or not low_mult <= self.overtime_multiplier <= high_mult:
            raise ConfigurationError(f"Overtime multiplier must be between {low_mult} and {high_mult}")

        validate_brackets(self.brackets)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "TaxConfiguration":
        """Build a configuration from a settings record, filling gaps with defaults.

        Accepts both the canonical field names and the company settings
        record written by the admin UI (``napsa_rate``, ``paye_bands`` with
        ``min``/``max`` rows, ...). Unknown keys raise ``ConfigurationError``.
        """
        defaults = default_configuration().to_mapping()
        values: Dict[str, Any] = dict(defaults)
        seen: Dict[str, str] = {}
        for key, value in data.items():
            if key in IGNORED_SETTINGS_FIELDS:
                continue
            field_name = MAPPING_ALIASES.get(key, key)
            if field_name not in defaults:
                raise ConfigurationError(f"Unknown tax configuration field '{key}'")
            if field_name in seen:
                raise ConfigurationError(f"Tax configuration sets '{field_name}' twice ('{seen[field_name]}' and '{key}')")
            seen[field_name] = key
            if value is not None:
                values[field_name] = value

        if not isinstance(values["brackets"], (list, tuple)):
            raise ConfigurationError("Tax brackets must be a list of rows")
        brackets = tuple(_bracket_from_row(index, row) for index, row in enumerate(values["brackets"]))

        return cls(
            contribution_rate=values["contribution_rate"],
            contribution_cap=values["contribution_cap"],
            health_levy_rate=values["health_levy_rate"],
            brackets=brackets,
            working_days_per_month=values["working_days_per_month"],
            working_hours_per_day=values["working_hours_per_day"],
            overtime_multiplier=values["overtime_multiplier"],
        )

    def to_mapping(self) -> Dict[str, Any]:
        return {
            "contribution_rate": str(self.contribution_rate),
            "contribution_cap": str(self.contribution_cap),
            "health_levy_rate": str(self.health_levy_rate),
            "brackets": [
                {
                    "lower_bound": str(b.lower_bound),
                    "upper_bound": None if b.upper_bound is None else str(b.upper_bound),
                    "rate": str(b.rate),
                }
                for b in self.brackets
            ],
            "working_days_per_month": self.working_days_per_month,
            "working_hours_per_day": str(self.working_hours_per_day),
            "overtime_multiplier": str(self.overtime_multiplier),
        }


DEFAULT_BRACKETS: Tuple[TaxBracket, ...] = (
    TaxBracket(lower_bound=Decimal("0"), upper_bound=Decimal("5100"), rate=Decimal("0")),
    TaxBracket(lower_bound=Decimal("5100"), upper_bound=Decimal("7100"), rate=Decimal("0.20")),
    TaxBracket(lower_bound=Decimal("7100"), upper_bound=Decimal("9200"), rate=Decimal("0.30")),
    TaxBracket(lower_bound=Decimal("9200"), upper_bound=None, rate=Decimal("0.37")),
)


def default_configuration() -> TaxConfiguration:
    """Statutory defaults: NAPSA 5% capped at K1,149.60, NHIS 1%, 2025 PAYE bands."""
    return TaxConfiguration(
        contribution_rate=Decimal("0.05"),
        contribution_cap=Decimal("1149.60"),
        health_levy_rate=Decimal("0.01"),
        brackets=DEFAULT_BRACKETS,
        working_days_per_month=22,
        working_hours_per_day=Decimal("8"),
        overtime_multiplier=Decimal("1.5"),
    )


def load_tax_configuration(path: Path) -> TaxConfiguration:
    if not path.exists():
        raise FileNotFoundError(f"Tax configuration not found at {path}")
    with path.open("r", encoding="utf-8") as handle:
        try:
            data = json.load(handle)
        except json.JSONDecodeError as exc:
            raise ConfigurationError(f"Tax configuration at {path} is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"Tax configuration at {path} must be a JSON object")
    config = TaxConfiguration.from_mapping(data)
    logger.info("tax_configuration_loaded", path=str(path), brackets=len(config.brackets))
    return config


def dump_tax_configuration(config: TaxConfiguration, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(config.to_mapping(), indent=2))
