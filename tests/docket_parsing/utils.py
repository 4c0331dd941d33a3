"""Shared helpers for docket tests."""

from collections.abc import Callable

from scotus_dockets.common.models import CaseRecord


def collect_results() -> tuple[Callable[[CaseRecord], None], list[CaseRecord]]:
    """Return an on_data callback and the list it appends to."""
    results: list[CaseRecord] = []

    def callback(case: CaseRecord) -> None:
        results.append(case)

    return callback, results


def page(*tables: str, title: str = "Docket 12A45", meta: str = "") -> bytes:
    """Build a minimal docket page around the given table bodies."""
    base_meta = (
        '<meta name="Term" content="2011">'
        '<meta name="CaseNumber" content="45">'
    )
    body = "".join(f"<table>{t}</table>" for t in tables)
    return (
        f"<html><head><title>{title}</title>{base_meta}{meta}</head>"
        f"<body>{body}</body></html>"
    ).encode("utf-8")
