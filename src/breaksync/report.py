"""Helpers for formatting job report output."""
from __future__ import annotations

import json
from enum import Enum

from tabulate import tabulate

from .job import JobReport


class OutputFormat(str, Enum):
    table = "table"
    json = "json"


def _payload(report: JobReport, show_steps: bool) -> dict:
    payload = {
        "job_name": report.job_name,
        "run_id": report.run_id,
        "steps": report.steps,
        "matched": report.matched,
        "elapsed_seconds": round(report.elapsed_seconds, 3),
        "synchronized": dict(report.synchronized),
        "breaks": dict(report.breaks),
    }
    if show_steps:
        payload["step_records"] = [
            {
                "number": record.number,
                "key": record.key,
                "synchronized": list(record.synchronized),
                "breaks": list(record.breaks),
            }
            for record in report.step_records
        ]
    return payload


def format_report(
    report: JobReport,
    output_format: OutputFormat | str = OutputFormat.table,
    show_steps: bool = False,
) -> str:
    try:
        output_format = OutputFormat(output_format)
    except ValueError:
        raise ValueError(f"Unsupported output format: {output_format}") from None
    if output_format is OutputFormat.json:
        return json.dumps(_payload(report, show_steps), indent=2)

    header = (
        f"Job {report.job_name} run_id={report.run_id} | "
        f"steps={report.steps} matched={report.matched}"
    )
    summary_rows = [["source", name, count] for name, count in report.synchronized.items()]
    summary_rows += [["rupture", name, count] for name, count in report.breaks.items()]
    summary = tabulate(summary_rows, headers=["kind", "name", "count"], tablefmt="plain")
    if not show_steps:
        return f"{header}\n\n{summary}"

    if not report.step_records:
        return f"{header}\n\n{summary}\n\nNo step records kept."
    step_rows = [
        [
            record.number,
            record.key,
            *("x" if name in record.synchronized else "-" for name in report.source_names),
            ",".join(record.breaks) or "-",
        ]
        for record in report.step_records
    ]
    headers = ["step", "key", *report.source_names, "breaks"]
    steps = tabulate(step_rows, headers=headers, tablefmt="plain")
    return f"{header}\n\n{summary}\n\n{steps}"


__all__ = ["OutputFormat", "format_report"]
