from __future__ import annotations

import argparse
import sys
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import List, Optional

from .calculator import PayrollCalculator
from .config import get_settings, get_tax_configuration
from .errors import ConfigurationError
from .formatting import format_currency, generate_pay_period
from .logging import configure_logging
from .models import AdHocAdjustment, AdjustmentKind, AdjustmentPhase, OvertimeInput, PayrollInputs
from .overtime import overtime_pay
from .tax_tables import TaxConfiguration, load_tax_configuration
from .validation import PayBasis, validate_inputs, validate_salary
from .views import format_configuration, format_payslip


def parse_adjustment(value: str) -> AdHocAdjustment:
    """Parse ``KIND:VALUE[%][:PHASE]``, e.g. ``deduction:10%:before_gross``."""
    parts = value.split(":")
    if len(parts) not in (2, 3):
        raise argparse.ArgumentTypeError(f"Invalid adjustment '{value}', expected KIND:VALUE[%][:PHASE]")
    kind_text, amount_text = parts[0], parts[1]
    phase_text = parts[2] if len(parts) == 3 else AdjustmentPhase.AFTER_TAX.value
    try:
        kind = AdjustmentKind(kind_text)
        phase = AdjustmentPhase(phase_text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc

    is_percentage = amount_text.endswith("%")
    try:
        if is_percentage:
            percentage = Decimal(amount_text[:-1]) / 100
            amount = None
        else:
            percentage = None
            amount = Decimal(amount_text)
    except InvalidOperation as exc:
        raise argparse.ArgumentTypeError(f"Invalid adjustment value '{amount_text}'") from exc

    return AdHocAdjustment(
        kind=kind,
        amount=amount,
        percentage=percentage,
        is_percentage=is_percentage,
        applies_before_gross=phase is AdjustmentPhase.BEFORE_GROSS,
        applies_before_tax=phase is AdjustmentPhase.BEFORE_TAX,
    )


def load_config(args: argparse.Namespace) -> TaxConfiguration:
    if args.config:
        return load_tax_configuration(Path(args.config))
    return get_tax_configuration(get_settings())


def cmd_calculate(args: argparse.Namespace) -> int:
    config = load_config(args)
    overtime = None
    if args.overtime_hours:
        overtime = OvertimeInput(overtime_hours=args.overtime_hours, hourly_rate=args.hourly_rate)
    inputs = PayrollInputs(
        basic_pay=args.basic_pay,
        allowances=args.allowances,
        bonuses=args.bonuses,
        gratuity=args.gratuity,
        loans=args.loans,
        other_deductions=args.other_deductions,
        adjustments=tuple(args.adjustment),
        overtime=overtime,
    )
    for warning in validate_inputs(inputs).warnings:
        print(f"warning: {warning}", file=sys.stderr)

    result = PayrollCalculator(config).calculate(inputs)
    print(format_payslip(result, locale=args.locale, currency=args.currency, period=args.period))
    return 0


def cmd_overtime(args: argparse.Namespace) -> int:
    multiplier = args.multiplier
    if multiplier is None:
        multiplier = load_config(args).overtime_multiplier
    amount = overtime_pay(args.regular_hours, args.rate, args.overtime_hours, multiplier)
    print(format_currency(amount, locale=args.locale, currency=args.currency))
    return 0


def cmd_validate_salary(args: argparse.Namespace) -> int:
    checked = validate_salary(args.salary, args.basis)
    if checked.is_valid:
        print("Salary looks valid")
        return 0
    for warning in checked.warnings:
        print(f"warning: {warning}")
    return 1


def cmd_show_config(args: argparse.Namespace) -> int:
    print(format_configuration(load_config(args), locale=args.locale, currency=args.currency))
    return 0


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Payslip calculator")
    parser.add_argument("--config", help="Path to a tax configuration JSON file")
    parser.add_argument("--locale", default=settings.locale)
    parser.add_argument("--currency", default=settings.currency)
    sub = parser.add_subparsers(dest="command", required=True)

    calc = sub.add_parser("calculate", help="Calculate a payslip")
    calc.add_argument("basic_pay", type=float)
    calc.add_argument("--allowances", type=float, default=0.0)
    calc.add_argument("--bonuses", type=float, default=0.0)
    calc.add_argument("--gratuity", type=float, default=0.0)
    calc.add_argument("--loans", type=float, default=0.0)
    calc.add_argument("--other-deductions", type=float, default=0.0)
    calc.add_argument("--overtime-hours", type=float, default=0.0)
    calc.add_argument("--hourly-rate", type=float, help="Defaults to basic pay over standard monthly hours")
    calc.add_argument(
        "--adjustment",
        type=parse_adjustment,
        action="append",
        default=[],
        help="KIND:VALUE[%%][:PHASE], repeatable; PHASE is before_gross, before_tax or after_tax",
    )
    calc.add_argument("--period", default=generate_pay_period())
    calc.set_defaults(func=cmd_calculate)

    ot = sub.add_parser("overtime", help="Calculate regular plus overtime pay")
    ot.add_argument("--regular-hours", type=float, required=True)
    ot.add_argument("--rate", type=float, required=True)
    ot.add_argument("--overtime-hours", type=float, default=0.0)
    ot.add_argument("--multiplier", type=float)
    ot.set_defaults(func=cmd_overtime)

    salary = sub.add_parser("validate-salary", help="Check a salary against plausibility bounds")
    salary.add_argument("salary", type=float)
    salary.add_argument("--basis", choices=[b.value for b in PayBasis], default=PayBasis.MONTHLY.value)
    salary.set_defaults(func=cmd_validate_salary)

    show = sub.add_parser("show-config", help="Print the active tax configuration")
    show.set_defaults(func=cmd_show_config)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    configure_logging(get_settings().log_level)
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        return args.func(args)
    except (ConfigurationError, FileNotFoundError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
