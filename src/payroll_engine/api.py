from __future__ import annotations

from decimal import Decimal
from typing import Annotated, Callable, Literal

from fastapi import APIRouter, Depends, FastAPI, Header, HTTPException, Request, status
from pydantic import BaseModel, ConfigDict, Field

from .calculator import PayrollCalculator
from .config import Settings, get_settings, get_tax_configuration
from .errors import ConfigurationError
from .logging import configure_logging, get_logger
from .models import AdHocAdjustment, OvertimeInput, PayrollInputs, PayrollResult
from .money import quantize_money
from .monitoring import configure_error_monitoring
from .overtime import overtime_pay
from .permissions import ROLES, can_access, has_role
from .tax_tables import TaxConfiguration
from .validation import validate_salary

logger = get_logger(__name__)

router = APIRouter(prefix="/payroll", tags=["payroll"])


class EngineModel(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False, extra="forbid")


class AdjustmentIn(EngineModel):
    kind: Literal["deduction", "addition"] = "deduction"
    name: str = ""
    amount: Decimal | None = Field(default=None, ge=0)
    percentage: Decimal | None = Field(default=None, ge=0, le=1)
    is_percentage: bool = False
    applies_before_gross: bool = False
    applies_before_tax: bool = False

    def to_domain(self) -> AdHocAdjustment:
        return AdHocAdjustment(
            kind=self.kind,
            amount=self.amount,
            percentage=self.percentage,
            is_percentage=self.is_percentage,
            applies_before_gross=self.applies_before_gross,
            applies_before_tax=self.applies_before_tax,
            name=self.name,
        )


class OvertimeIn(EngineModel):
    overtime_hours: Decimal = Field(ge=0)
    regular_hours: Decimal = Field(default=0, ge=0)
    hourly_rate: Decimal | None = Field(default=None, ge=0)
    multiplier: Decimal | None = Field(default=None, ge=1)

    def to_domain(self) -> OvertimeInput:
        return OvertimeInput(
            overtime_hours=self.overtime_hours,
            regular_hours=self.regular_hours,
            hourly_rate=self.hourly_rate,
            multiplier=self.multiplier,
        )


class PayrollInputsIn(EngineModel):
    basic_pay: Decimal = Field(ge=0)
    allowances: Decimal = Field(default=0, ge=0)
    bonuses: Decimal = Field(default=0, ge=0)
    gratuity: Decimal = Field(default=0, ge=0)
    loans: Decimal = Field(default=0, ge=0)
    other_deductions: Decimal = Field(default=0, ge=0)
    adjustments: list[AdjustmentIn] = []
    overtime: OvertimeIn | None = None

    def to_domain(self) -> PayrollInputs:
        return PayrollInputs(
            basic_pay=self.basic_pay,
            allowances=self.allowances,
            bonuses=self.bonuses,
            gratuity=self.gratuity,
            loans=self.loans,
            other_deductions=self.other_deductions,
            adjustments=tuple(a.to_domain() for a in self.adjustments),
            overtime=self.overtime.to_domain() if self.overtime else None,
        )


class BracketOut(BaseModel):
    bracket_index: int
    rate_applied: Decimal
    amount_taxed: Decimal
    tax: Decimal


class ContributionOut(BaseModel):
    amount: Decimal
    rate_applied: Decimal
    was_capped: bool


class BreakdownOut(BaseModel):
    tax_brackets: list[BracketOut]
    social_security: ContributionOut
    health_levy: ContributionOut


class PayrollResultOut(BaseModel):
    basic_pay: Decimal
    allowances: Decimal
    bonuses: Decimal
    gratuity: Decimal
    overtime_pay: Decimal
    total_additions: Decimal
    gross_pay: Decimal
    deductions_before_gross: Decimal
    taxable_income: Decimal
    social_security: Decimal
    health_levy: Decimal
    deductions_before_tax: Decimal
    tax: Decimal
    loans: Decimal
    other_deductions: Decimal
    total_deductions: Decimal
    net_pay: Decimal
    breakdown: BreakdownOut

    @classmethod
    def from_result(cls, result: PayrollResult) -> "PayrollResultOut":
        return cls.model_validate(result.as_dict())


class OvertimeRequest(EngineModel):
    regular_hours: Decimal = Field(ge=0)
    regular_rate: Decimal = Field(ge=0)
    overtime_hours: Decimal = Field(default=0, ge=0)
    overtime_multiplier: Decimal | None = Field(default=None, ge=1)


class OvertimeOut(BaseModel):
    amount: Decimal


class SalaryCheckRequest(EngineModel):
    salary: Decimal
    pay_basis: Literal["hourly", "monthly", "contract"] = "monthly"


class SalaryCheckOut(BaseModel):
    is_valid: bool
    warnings: list[str]


class TaxBracketOut(BaseModel):
    lower_bound: Decimal
    upper_bound: Decimal | None
    rate: Decimal


class TaxConfigurationOut(BaseModel):
    contribution_rate: Decimal
    contribution_cap: Decimal
    health_levy_rate: Decimal
    brackets: list[TaxBracketOut]
    working_days_per_month: int
    working_hours_per_day: Decimal
    overtime_multiplier: Decimal


def get_configuration(request: Request) -> TaxConfiguration:
    try:
        return get_tax_configuration(request.app.state.settings)
    except (ConfigurationError, FileNotFoundError) as exc:
        logger.error("tax_configuration_invalid", error=str(exc))
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from exc


def require_permission(resource: str, action: str) -> Callable[..., str]:
    def checker(x_user_role: Annotated[str | None, Header()] = None) -> str:
        if not has_role(x_user_role, ROLES):
            logger.warning("unknown_role", role=x_user_role, resource=resource, action=action)
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not permitted")
        if not can_access(x_user_role, resource, action):
            logger.warning("permission_denied", role=x_user_role, resource=resource, action=action)
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not permitted")
        return x_user_role

    return checker


@router.post("/calculate", response_model=PayrollResultOut)
def calculate_payroll(
    payload: PayrollInputsIn,
    config: TaxConfiguration = Depends(get_configuration),
    role: str = Depends(require_permission("payroll", "create")),
) -> PayrollResultOut:
    result = PayrollCalculator(config).calculate(payload.to_domain())
    logger.info("payslip_calculated", role=role, net_pay=str(result.net_pay))
    return PayrollResultOut.from_result(result)


@router.post("/overtime", response_model=OvertimeOut)
def calculate_overtime(
    payload: OvertimeRequest,
    config: TaxConfiguration = Depends(get_configuration),
    role: str = Depends(require_permission("payroll", "read")),
) -> OvertimeOut:
    multiplier = payload.overtime_multiplier or config.overtime_multiplier
    amount = overtime_pay(payload.regular_hours, payload.regular_rate, payload.overtime_hours, multiplier)
    return OvertimeOut(amount=quantize_money(amount))


@router.post("/validate-salary", response_model=SalaryCheckOut)
def check_salary(
    payload: SalaryCheckRequest,
    role: str = Depends(require_permission("employees", "read")),
) -> SalaryCheckOut:
    checked = validate_salary(payload.salary, payload.pay_basis)
    return SalaryCheckOut(is_valid=checked.is_valid, warnings=list(checked.warnings))


configuration_router = APIRouter(prefix="/tax-configuration", tags=["settings"])


@configuration_router.get("", response_model=TaxConfigurationOut)
def read_configuration(
    config: TaxConfiguration = Depends(get_configuration),
    role: str = Depends(require_permission("settings", "read")),
) -> TaxConfigurationOut:
    return TaxConfigurationOut.model_validate(config.to_mapping())


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)
    configure_error_monitoring(settings)

    app = FastAPI(title=settings.app_name)
    app.state.settings = settings
    app.include_router(router)
    app.include_router(configuration_router)

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok", "environment": settings.env}

    logger.info("startup_complete", env=settings.env)
    return app
