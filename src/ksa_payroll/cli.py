from __future__ import annotations

import argparse
import json
from datetime import date
from pathlib import Path

from pydantic import ValidationError

from .calculator import PayrollCalculator
from .config import Settings, get_settings
from .eosb import EOSBCalculator
from .errors import PayrollError
from .gosi import GOSICalculator
from .leave import Holiday, count_leave_days
from .lifecycle import FLOWS
from .logging import configure_logging, get_logger
from .monitoring import configure_error_monitoring
from .overtime import OvertimeCalculator
from .rate_tables import RateTableRepository
from .records import save_eosb_result, save_payroll_record, transition_record
from .schemas import EOSBRequest, EmployeeIn, PayrollRunInput
from .storage import DataStore
from .wizard import PayrollRunWizard

logger = get_logger(__name__)


def emit(payload) -> None:
    print(json.dumps(payload, default=str, indent=2))


def load_rate_table(settings: Settings):
    return RateTableRepository(settings.rate_table_dir).load(settings.rate_table_version)


def store_from_settings(settings: Settings) -> DataStore:
    return DataStore(settings.data_path)


def cmd_eosb(args: argparse.Namespace, settings: Settings) -> None:
    employee = EmployeeIn(
        id=args.employee or "",
        hire_date=args.hire_date,
        basic_salary=args.salary,
        housing_allowance=args.housing,
    ).to_domain()
    request = EOSBRequest(
        termination_type=args.type,
        termination_date=args.termination_date,
        last_basic_salary=args.salary,
        include_housing_allowance=args.include_housing,
        deductions=args.deductions,
    ).to_domain()
    result = EOSBCalculator().calculate_for_employee(employee, request)
    record = result.to_record()
    if args.save:
        record = save_eosb_result(store_from_settings(settings), result)
    emit(record)


def cmd_gosi(args: argparse.Namespace, settings: Settings) -> None:
    employee = EmployeeIn(
        id=args.employee or "",
        basic_salary=args.basic,
        housing_allowance=args.housing,
        nationality=args.nationality,
        gosi_applicable=not args.not_applicable,
    ).to_domain()
    result = GOSICalculator(load_rate_table(settings)).calculate_for_employee(employee)
    emit(result.to_record())


def cmd_overtime(args: argparse.Namespace, settings: Settings) -> None:
    result = OvertimeCalculator(load_rate_table(settings)).calculate(args.basic, args.hours, args.working_days)
    emit(result.to_record())


def cmd_run_payroll(args: argparse.Namespace, settings: Settings) -> None:
    payload = PayrollRunInput.model_validate_json(Path(args.input).read_text())
    calculator = PayrollCalculator(RateTableRepository(settings.rate_table_dir), settings.rate_table_version)
    totals = PayrollRunWizard(calculator).preview(payload.month, payload.requests(), args.employee)
    summary = totals.summary()
    if args.save:
        store = store_from_settings(settings)
        saved = []
        for record in totals.employees.values():
            try:
                saved.append(save_payroll_record(store, record, processed_by=args.processed_by)["id"])
            except PayrollError as exc:
                summary["errors"].append({"employee_id": record.employee_id, "error": str(exc)})
        summary["saved_ids"] = saved
    else:
        summary["records"] = [record.to_record() for record in totals.employees.values()]
    emit(summary)


def cmd_leave_days(args: argparse.Namespace, settings: Settings) -> None:
    holidays = [Holiday(day=value) for value in args.holiday or []]
    breakdown = count_leave_days(args.start, args.end, holidays)
    emit(breakdown.to_record())


def cmd_transition(args: argparse.Namespace, settings: Settings) -> None:
    record = transition_record(store_from_settings(settings), args.collection, args.id, args.status, args.actor)
    emit(record)


def cmd_list(args: argparse.Namespace, settings: Settings) -> None:
    store = store_from_settings(settings)
    emit(store.filter(args.collection, status=args.status) if args.status else store.list(args.collection))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Saudi payroll calculations")
    sub = parser.add_subparsers(dest="command", required=True)

    eosb = sub.add_parser("eosb", help="Calculate end of service benefit")
    eosb.add_argument("hire_date")
    eosb.add_argument("termination_date")
    eosb.add_argument("--type", default="resignation", help="Termination type")
    eosb.add_argument("--salary", type=float, required=True, help="Last basic salary (SAR)")
    eosb.add_argument("--housing", type=float, default=0.0, help="Housing allowance (SAR)")
    eosb.add_argument("--include-housing", action="store_true")
    eosb.add_argument("--deductions", type=float, default=0.0)
    eosb.add_argument("--employee", help="Employee id, required with --save")
    eosb.add_argument("--save", action="store_true", help="Store the result as an EOSBRecord")
    eosb.set_defaults(func=cmd_eosb)

    gosi = sub.add_parser("gosi", help="Calculate GOSI contributions")
    gosi.add_argument("--basic", type=float, required=True)
    gosi.add_argument("--housing", type=float, default=0.0)
    gosi.add_argument("--nationality", default="")
    gosi.add_argument("--employee")
    gosi.add_argument("--not-applicable", action="store_true", help="Employee is exempt from GOSI")
    gosi.set_defaults(func=cmd_gosi)

    overtime = sub.add_parser("overtime", help="Calculate overtime pay")
    overtime.add_argument("--basic", type=float, required=True)
    overtime.add_argument("--hours", type=float, required=True)
    overtime.add_argument("--working-days", type=int, help="Defaults to the rate table setting")
    overtime.set_defaults(func=cmd_overtime)

    run = sub.add_parser("run-payroll", help="Calculate monthly payroll from a JSON input file")
    run.add_argument("input")
    run.add_argument("--employee", action="append", help="Limit the run to these employee ids")
    run.add_argument("--save", action="store_true", help="Store calculated records")
    run.add_argument("--processed-by")
    run.set_defaults(func=cmd_run_payroll)

    leave_days = sub.add_parser("leave-days", help="Count working days in a leave range")
    leave_days.add_argument("start", type=date.fromisoformat)
    leave_days.add_argument("end", type=date.fromisoformat)
    leave_days.add_argument(
        "--holiday", type=date.fromisoformat, action="append", help="Public holiday date (repeatable)"
    )
    leave_days.set_defaults(func=cmd_leave_days)

    transition = sub.add_parser("transition", help="Advance a stored record's status")
    transition.add_argument("collection", choices=sorted(FLOWS))
    transition.add_argument("id")
    transition.add_argument("status")
    transition.add_argument("--actor")
    transition.set_defaults(func=cmd_transition)

    listing = sub.add_parser("list", help="List stored records")
    listing.add_argument("collection", choices=sorted(FLOWS))
    listing.add_argument("--status")
    listing.set_defaults(func=cmd_list)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    settings = get_settings()
    configure_logging(settings.log_level)
    configure_error_monitoring(settings)
    try:
        args.func(args, settings)
    except ValidationError as exc:
        raise SystemExit(f"error: invalid input\n{exc}") from None
    except (PayrollError, FileNotFoundError) as exc:
        logger.error("command_failed", command=args.command, error=str(exc))
        raise SystemExit(f"error: {exc}") from None


if __name__ == "__main__":
    main()
