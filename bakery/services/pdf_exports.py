"""Printable fulfillment sheet for one delivery/pickup date."""

from __future__ import annotations

import re
from collections import defaultdict
from io import BytesIO
from typing import Any, Iterable

from bakery.models.order import Order
from bakery.utils.pdf_fonts import register_pdf_font


def _reportlab():
    from reportlab.lib import colors
    from reportlab.lib.pagesizes import letter
    from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
    from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

    return {
        "colors": colors,
        "letter": letter,
        "ParagraphStyle": ParagraphStyle,
        "getSampleStyleSheet": getSampleStyleSheet,
        "Paragraph": Paragraph,
        "SimpleDocTemplate": SimpleDocTemplate,
        "Spacer": Spacer,
        "Table": Table,
        "TableStyle": TableStyle,
    }


def sanitize_filename(value: str, max_length: int = 80) -> str:
    """Return a filesystem-friendly filename fragment."""
    normalized = re.sub(r"[\\/:*?\"<>|]+", "_", (value or "").strip())
    normalized = re.sub(r"\s+", "_", normalized)
    normalized = re.sub(r"_+", "_", normalized).strip("._")
    return (normalized or "sheet")[:max_length]


def _format_cents(value: int | None) -> str:
    return f"${(value or 0) / 100:.2f}"


def serialize_order_for_sheet(order: Order) -> dict[str, Any]:
    """Flatten an order into the row shape used by the sheet."""
    is_delivery = order.fulfillment_method == "delivery"
    return {
        "id": order.id,
        "order_number": order.order_number,
        "customer_name": order.customer_name,
        "fulfillment_method": order.fulfillment_method,
        "address": order.delivery_address if is_delivery else None,
        "zip": order.delivery_zip if is_delivery else None,
        "time_window": order.delivery_time_window if is_delivery else order.pickup_time_window,
        "status": (order.delivery_status if is_delivery else order.pickup_status) or "pending",
        "location_name": None if is_delivery or order.pickup_location is None else order.pickup_location.name,
        "notes": order.notes,
        "total_cents": order.total_cents,
    }


def group_pickups_by_location(rows: Iterable[dict[str, Any]]) -> dict[str, list[dict[str, Any]]]:
    grouped: dict[str, list[dict[str, Any]]] = defaultdict(list)
    for row in rows:
        if row.get("fulfillment_method") == "pickup":
            grouped[str(row.get("location_name") or "Unknown location")].append(row)
    return dict(sorted(grouped.items(), key=lambda item: item[0].lower()))


def _build_styles() -> dict[str, Any]:
    font_name = register_pdf_font()
    rl = _reportlab()
    styles = rl["getSampleStyleSheet"]()
    return {
        "font_name": font_name,
        "title": rl["ParagraphStyle"]("SheetTitle", parent=styles["Title"], fontName=font_name),
        "heading": rl["ParagraphStyle"]("SheetHeading2", parent=styles["Heading2"], fontName=font_name),
        "normal": rl["ParagraphStyle"]("SheetNormal", parent=styles["Normal"], fontName=font_name),
    }


def _rows_table(header: list[str], rows: list[list[str]], widths: list[int], styles: dict[str, Any]) -> Any:
    rl = _reportlab()
    table = rl["Table"]([header, *rows], colWidths=widths, repeatRows=1)
    table.setStyle(
        rl["TableStyle"](
            [
                ("BACKGROUND", (0, 0), (-1, 0), rl["colors"].lightgrey),
                ("GRID", (0, 0), (-1, -1), 0.5, rl["colors"].black),
                ("FONTNAME", (0, 0), (-1, -1), styles["font_name"]),
                ("FONTSIZE", (0, 0), (-1, -1), 8),
                ("VALIGN", (0, 0), (-1, -1), "TOP"),
            ]
        )
    )
    return table


def render_fulfillment_sheet_pdf(rows: Iterable[dict[str, Any]], meta: dict[str, Any]) -> bytes:
    """Render deliveries and per-location pickups for one date as PDF bytes."""
    rows = list(rows)
    styles = _build_styles()
    rl = _reportlab()

    story: list[Any] = [
        rl["Paragraph"](f"Fulfillment sheet: {meta.get('date', '-')}", styles["title"]),
        rl["Paragraph"](f"Generated: {meta.get('generated_at', '-')}", styles["normal"]),
        rl["Spacer"](1, 12),
    ]

    deliveries = [row for row in rows if row.get("fulfillment_method") == "delivery"]
    story.append(rl["Paragraph"](f"Deliveries ({len(deliveries)})", styles["heading"]))
    if deliveries:
        story.append(
            _rows_table(
                ["#", "Customer", "Address", "ZIP", "Window", "Status", "Total"],
                [
                    [
                        str(row.get("order_number") or row.get("id", "-")),
                        str(row.get("customer_name") or "-"),
                        str(row.get("address") or "-"),
                        str(row.get("zip") or "-"),
                        str(row.get("time_window") or "-"),
                        str(row.get("status") or "pending"),
                        _format_cents(row.get("total_cents")),
                    ]
                    for row in deliveries
                ],
                [40, 90, 150, 45, 70, 70, 50],
                styles,
            )
        )
    else:
        story.append(rl["Paragraph"]("No deliveries scheduled.", styles["normal"]))
    story.append(rl["Spacer"](1, 12))

    pickups = group_pickups_by_location(rows)
    story.append(rl["Paragraph"](f"Pickups ({sum(len(items) for items in pickups.values())})", styles["heading"]))
    if not pickups:
        story.append(rl["Paragraph"]("No pickups scheduled.", styles["normal"]))
    for location_name, location_rows in pickups.items():
        story.append(rl["Paragraph"](location_name, styles["normal"]))
        story.append(
            _rows_table(
                ["#", "Customer", "Window", "Status", "Notes", "Total"],
                [
                    [
                        str(row.get("order_number") or row.get("id", "-")),
                        str(row.get("customer_name") or "-"),
                        str(row.get("time_window") or "-"),
                        str(row.get("status") or "pending"),
                        str(row.get("notes") or "-"),
                        _format_cents(row.get("total_cents")),
                    ]
                    for row in location_rows
                ],
                [40, 110, 80, 80, 150, 50],
                styles,
            )
        )
        story.append(rl["Spacer"](1, 8))

    buffer = BytesIO()
    rl["SimpleDocTemplate"](buffer, pagesize=rl["letter"]).build(story)
    return buffer.getvalue()
