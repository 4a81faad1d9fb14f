"""PDF feasibility report for a hybrid microgrid calculation.

Builds a short report for preliminary feasibility review from a
:class:`~hybrid_engine.simulation.runner.CalculationResults` value: cover,
executive summary, system design, energy, financial, cash flow,
environmental, sensitivity and advisories.
"""
from io import BytesIO
from datetime import datetime
from typing import Any

import numpy as np
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.platypus import (
    SimpleDocTemplate,
    Paragraph,
    Spacer,
    Table,
    TableStyle,
    Image,
    PageBreak,
)
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle

from hybrid_engine.simulation.runner import CalculationResults

# ══════════════════════════════════════════════════════════════════════
# Constants
# ══════════════════════════════════════════════════════════════════════

CHART_DPI = 150
PAGE_W, PAGE_H = A4
MARGIN = 15 * mm

# Color palette
C_PRIMARY = "#059669"
C_DARK = "#065f46"
C_SOLAR = "#eab308"
C_BATTERY = "#3b82f6"
C_DIESEL = "#ea580c"
C_RED = "#dc2626"
C_GRAY = "#6b7280"
C_LIGHT_BG = "#f9fafb"
C_GRID = "#e5e7eb"


# ══════════════════════════════════════════════════════════════════════
# Matplotlib setup
# ══════════════════════════════════════════════════════════════════════

def _init_mpl():
    import matplotlib
    matplotlib.use("Agg")
    import matplotlib.pyplot as plt
    plt.rcParams.update({
        "font.size": 8,
        "axes.titlesize": 10,
        "axes.labelsize": 8,
        "xtick.labelsize": 7,
        "ytick.labelsize": 7,
        "legend.fontsize": 7,
        "figure.dpi": CHART_DPI,
    })
    return plt


def _fig_to_buf(fig) -> BytesIO:
    """Save matplotlib figure to BytesIO PNG buffer."""
    buf = BytesIO()
    fig.savefig(buf, format="png", dpi=CHART_DPI, bbox_inches="tight")
    import matplotlib.pyplot as plt
    plt.close(fig)
    buf.seek(0)
    return buf


# ══════════════════════════════════════════════════════════════════════
# Charts
# ══════════════════════════════════════════════════════════════════════

def _make_monthly_chart(months: list[str], solar: list[float], diesel: list[float]) -> BytesIO:
    """Monthly solar vs diesel stacked bars."""
    plt = _init_mpl()
    fig, ax = plt.subplots(figsize=(6, 3))
    x = np.arange(len(months))
    ax.bar(x, solar, 0.6, label="Solar", color=C_SOLAR, alpha=0.85)
    ax.bar(x, diesel, 0.6, bottom=solar, label="Diesel", color=C_DIESEL, alpha=0.85)
    ax.set_xticks(x)
    ax.set_xticklabels(months)
    ax.set_ylabel("kWh")
    ax.set_title("Monthly Energy Supply", fontweight="bold")
    ax.legend(loc="upper right", fontsize=6)
    ax.grid(True, alpha=0.3, axis="y")
    fig.tight_layout()
    return _fig_to_buf(fig)


def _make_dispatch_chart(season: dict[str, Any]) -> BytesIO:
    """24-hour stacked area chart for one seasonal day."""
    plt = _init_mpl()
    fig, ax = plt.subplots(figsize=(6, 2.6))
    hours = season["hours"]
    h = np.arange(len(hours))
    solar_to_load = np.array([
        max(0.0, t["solar"] - t["battery_charge"] - t["curtailed"]) for t in hours
    ])
    discharge = np.array([t["battery_discharge"] for t in hours])
    diesel = np.array([t["diesel"] for t in hours])
    load = np.array([t["load"] for t in hours])

    ax.stackplot(
        h, solar_to_load, discharge, diesel,
        labels=["Solar", "Battery", "Diesel"],
        colors=[C_SOLAR, C_BATTERY, C_DIESEL], alpha=0.7,
    )
    ax.plot(h, load, "k-", linewidth=1.5, label="Load")
    ax.set_xlabel("Hour of Day")
    ax.set_ylabel("Power (kW)")
    ax.set_title(f"{season['name']} Representative Day", fontweight="bold")
    ax.set_xlim(0, 23)
    ax.legend(loc="upper right", fontsize=6)
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    return _fig_to_buf(fig)


def _make_cashflow_chart(rows: list[dict[str, Any]]) -> BytesIO:
    """Cumulative nominal cost, hybrid vs diesel-only."""
    plt = _init_mpl()
    fig, ax = plt.subplots(figsize=(6, 3))
    years = [r["year"] for r in rows]
    ax.plot(years, [r["hybrid_cumulative"] / 1e6 for r in rows],
            color=C_PRIMARY, linewidth=1.2, label="Hybrid")
    ax.plot(years, [r["diesel_cumulative"] / 1e6 for r in rows],
            color=C_RED, linewidth=1.2, label="Diesel Only")
    ax.set_xlabel("Year")
    ax.set_ylabel("Cumulative Cost ($M)")
    ax.set_title("Cumulative Lifetime Cost", fontweight="bold")
    ax.legend(fontsize=6, loc="best")
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    return _fig_to_buf(fig)


# ══════════════════════════════════════════════════════════════════════
# Canvas Callbacks (header / footer / page numbers)
# ══════════════════════════════════════════════════════════════════════

def _on_first_page(canvas, doc):
    """Cover page: subtle footer only."""
    canvas.saveState()
    canvas.setFont("Helvetica", 7)
    canvas.setFillColor(colors.HexColor(C_GRAY))
    canvas.drawCentredString(
        PAGE_W / 2, 10 * mm,
        "Preliminary feasibility estimate only",
    )
    canvas.restoreState()


def _on_later_pages(canvas, doc):
    """Pages 2+: header line + page number."""
    canvas.saveState()
    canvas.setStrokeColor(colors.HexColor(C_PRIMARY))
    canvas.setLineWidth(0.5)
    canvas.line(MARGIN, PAGE_H - 14 * mm, PAGE_W - MARGIN, PAGE_H - 14 * mm)
    canvas.setFont("Helvetica", 7)
    canvas.setFillColor(colors.HexColor(C_GRAY))
    canvas.drawString(MARGIN, PAGE_H - 12 * mm, "Hybrid Power Feasibility Report")
    canvas.drawRightString(PAGE_W - MARGIN, 8 * mm, f"Page {doc.page}")
    canvas.restoreState()


# ══════════════════════════════════════════════════════════════════════
# Styles & Table Helpers
# ══════════════════════════════════════════════════════════════════════

def _get_styles():
    """Return configured paragraph styles."""
    styles = getSampleStyleSheet()
    styles.add(ParagraphStyle(
        "ReportTitle", parent=styles["Title"],
        fontSize=24, spaceAfter=6, textColor=colors.HexColor(C_PRIMARY),
    ))
    styles.add(ParagraphStyle(
        "Subtitle", parent=styles["Heading2"],
        fontSize=13, textColor=colors.HexColor(C_DARK), spaceAfter=4,
    ))
    styles.add(ParagraphStyle(
        "SectionHeader", parent=styles["Heading2"],
        fontSize=13, spaceBefore=14, spaceAfter=6,
        textColor=colors.HexColor(C_DARK),
        borderWidth=1, borderColor=colors.HexColor(C_PRIMARY),
        borderPadding=(0, 0, 3, 0),
    ))
    styles.add(ParagraphStyle(
        "BodyText2", parent=styles["Normal"],
        fontSize=9, leading=13, spaceAfter=4,
    ))
    styles.add(ParagraphStyle(
        "CoverInfo", parent=styles["Normal"],
        fontSize=11, leading=16, spaceAfter=2,
    ))
    styles.add(ParagraphStyle(
        "BulletItem", parent=styles["Normal"],
        fontSize=9, leading=13, leftIndent=12, bulletIndent=0, spaceAfter=2,
    ))
    return styles


def _styled_table(
    data: list[list],
    col_widths: list,
    header_color: str = C_DARK,
    row_bg_alt: str = C_LIGHT_BG,
) -> Table:
    """Create a consistently styled table."""
    t = Table(data, colWidths=col_widths, repeatRows=1)
    t.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor(header_color)),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 8),
        ("GRID", (0, 0), (-1, -1), 0.4, colors.HexColor(C_GRID)),
        ("ROWBACKGROUNDS", (0, 1), (-1, -1),
         [colors.white, colors.HexColor(row_bg_alt)]),
        ("TOPPADDING", (0, 0), (-1, -1), 3),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 3),
        ("LEFTPADDING", (0, 0), (-1, -1), 4),
        ("RIGHTPADDING", (0, 0), (-1, -1), 4),
    ]))
    return t


def _fmt(
    v: float | None, fmt_str: str = ",.0f",
    prefix: str = "", suffix: str = "",
) -> str:
    """Safe number formatting."""
    if v is None:
        return "N/A"
    try:
        return f"{prefix}{v:{fmt_str}}{suffix}"
    except (ValueError, TypeError):
        return "N/A"


def _fmt_k(v: float | None) -> str:
    """Dollar amount abbreviated to $k / $M."""
    if v is None:
        return "N/A"
    if abs(v) >= 1e6:
        return f"${v / 1e6:,.2f}M"
    if abs(v) >= 1e3:
        return f"${v / 1e3:,.0f}k"
    return f"${v:,.0f}"


# ══════════════════════════════════════════════════════════════════════
# Section 1: Cover Page
# ══════════════════════════════════════════════════════════════════════

def _build_cover(styles, data: dict, results: CalculationResults, info: dict) -> list:
    s = data["sizing"]
    elems: list = []
    elems.append(Spacer(1, 50 * mm))
    elems.append(Paragraph(info.get("name") or "Hybrid Power Project", styles["ReportTitle"]))
    elems.append(Paragraph(
        f"{results.config.location.name} \u2014 {s['pv_kwp']:,.0f} kWp | "
        f"{s['battery_kwh']:,.0f} kWh Battery | {s['diesel_kw']:,.0f} kW Diesel",
        styles["Subtitle"],
    ))
    elems.append(Spacer(1, 15 * mm))

    lines = []
    if info.get("client"):
        lines.append(f"<b>Client:</b> {info['client']}")
    if info.get("reference"):
        lines.append(f"<b>Reference:</b> {info['reference']}")
    if info.get("engineer"):
        lines.append(f"<b>Prepared by:</b> {info['engineer']}")
    lines.append(f"<b>Date:</b> {info.get('date') or datetime.now().strftime('%Y-%m-%d')}")
    lines.append(f"<b>Revision:</b> {info.get('revision') or 'A'}")
    loc = results.config.location
    lines.append(f"<b>Location:</b> {loc.latitude:.2f}\u00b0, {loc.longitude:.2f}\u00b0")

    for line in lines:
        elems.append(Paragraph(line, styles["CoverInfo"]))
    elems.append(PageBreak())
    return elems


# ══════════════════════════════════════════════════════════════════════
# Section 2: Executive Summary
# ══════════════════════════════════════════════════════════════════════

def _build_executive_summary(styles, data: dict, project_life: int) -> list:
    s, f, e = data["sizing"], data["financials"], data["energy"]
    elems: list = []
    elems.append(Paragraph("1. Executive Summary", styles["SectionHeader"]))

    rows = [
        ["Metric", "Value"],
        ["Solar PV", _fmt(s["pv_kwp"], ",.0f", "", " kWp")],
        ["Battery", _fmt(s["battery_kwh"], ",.0f", "", " kWh")],
        ["Diesel", _fmt(s["diesel_kw"], ",.0f", "", " kW")],
        ["Simple Payback", _fmt(f["payback_years"], ".1f", "", " years")],
        [f"NPV Benefit ({project_life} years)", _fmt_k(f["npv_benefit"])],
        ["Average Annual Savings", _fmt_k(f["annual_savings_avg"])],
        ["\u200bCO\u2082 Reduction", _fmt(e["co2_saved_t"], ",.0f", "", " t/yr")],
    ]
    t = _styled_table(rows, [100 * mm, 70 * mm], header_color=C_PRIMARY)
    t.setStyle(TableStyle([("ALIGN", (1, 0), (1, -1), "RIGHT")]))
    elems.append(t)
    elems.append(Spacer(1, 6 * mm))

    if f["npv_benefit"] > 0:
        txt = (
            f"Over {project_life} years the hybrid system saves "
            f"{_fmt_k(f['npv_benefit'])} in present-value terms relative to a "
            f"diesel-only supply."
        )
    else:
        txt = (
            "At the configured costs the hybrid system does not improve on a "
            "diesel-only supply in present-value terms."
        )
    elems.append(Paragraph(f"<b>Economic Assessment:</b> {txt}", styles["BodyText2"]))
    return elems


# ══════════════════════════════════════════════════════════════════════
# Section 3: System Design
# ══════════════════════════════════════════════════════════════════════

def _build_system_design(styles, data: dict, results: CalculationResults) -> list:
    s, e = data["sizing"], data["energy"]
    tech = results.config.technology
    pv, tr = tech.pv_spec, tech.tracking_spec
    bt, dm = tech.battery_spec, tech.diesel_spec

    elems: list = []
    elems.append(Paragraph("2. System Design", styles["SectionHeader"]))
    rows = [
        ["Component", "Specification"],
        ["Solar PV",
         f"{s['pv_kwp']:,.0f} kWp DC / {s['inverter_kw']:,.0f} kW AC · "
         f"{pv.name} · {tr.name}"],
        ["Battery",
         f"{s['battery_kwh']:,.0f} kWh / {s['battery_kw']:,.0f} kW · "
         f"{bt.name} · DoD {bt.dod * 100:.0f}%"],
        ["Diesel",
         f"{s['diesel_units']} × {s['diesel_unit_kw']:,.0f} kW · "
         f"{dm.name} · SFC {e['sfc_l_per_kwh']:.3f} L/kWh"],
        ["Performance Ratio", f"{s['effective_pr'] * 100:.1f}%"],
        ["PV Capacity Factor", f"{e['pv_capacity_factor_pct']:.1f}%"],
        ["Battery Hours", f"{e['battery_hours']:.1f} h at average load"],
    ]
    elems.append(_styled_table(rows, [50 * mm, 120 * mm]))
    return elems


# ══════════════════════════════════════════════════════════════════════
# Section 4: Energy
# ══════════════════════════════════════════════════════════════════════

def _build_energy(styles, data: dict) -> list:
    e = data["energy"]
    monthly = e["monthly"]
    elems: list = []
    elems.append(Paragraph("3. Energy Balance", styles["SectionHeader"]))

    rows: list[list[str]] = [["Month", "PSH", "Solar kWh", "Diesel kWh", "Fuel L", "RE %"]]
    for m in monthly:
        rows.append([
            m["month"], f"{m['peak_sun_hours']:.1f}", f"{m['solar_kwh']:,}",
            f"{m['diesel_kwh']:,}", f"{m['fuel_litres']:,}", f"{m['renewable_pct']}%",
        ])
    t = _styled_table(rows, [22 * mm, 20 * mm, 34 * mm, 34 * mm, 34 * mm, 26 * mm])
    t.setStyle(TableStyle([("ALIGN", (1, 0), (-1, -1), "RIGHT")]))
    elems.append(t)
    elems.append(Spacer(1, 4 * mm))

    buf = _make_monthly_chart(
        [m["month"] for m in monthly],
        [m["solar_kwh"] for m in monthly],
        [m["diesel_kwh"] for m in monthly],
    )
    elems.append(Image(buf, width=170 * mm, height=85 * mm))

    for season in data["seasons"]:
        buf = _make_dispatch_chart(season)
        elems.append(Image(buf, width=160 * mm, height=70 * mm))

    elems.append(PageBreak())
    return elems


# ══════════════════════════════════════════════════════════════════════
# Section 5: Financial & Cash Flow
# ══════════════════════════════════════════════════════════════════════

def _build_financial(styles, data: dict) -> list:
    f = data["financials"]
    capex = f["capex"]
    elems: list = []
    elems.append(Paragraph("4. Financial", styles["SectionHeader"]))

    rows = [
        ["", "Hybrid", "Diesel Only"],
        ["CAPEX", _fmt_k(capex["hybrid_total"]), _fmt_k(capex["diesel_only"])],
        ["Avg OPEX/yr", _fmt_k(f["hybrid_opex_avg"]), _fmt_k(f["diesel_opex_avg"])],
        ["LCOE", _fmt(f["lcoe_hybrid"], ".3f", "$", "/kWh"),
         _fmt(f["lcoe_diesel"], ".3f", "$", "/kWh")],
        ["NPC", _fmt_k(f["npv_hybrid"]), _fmt_k(f["npv_diesel"])],
    ]
    t = _styled_table(rows, [50 * mm, 60 * mm, 60 * mm])
    t.setStyle(TableStyle([("ALIGN", (1, 0), (-1, -1), "RIGHT")]))
    elems.append(t)
    elems.append(Spacer(1, 4 * mm))

    breakdown = [["CAPEX Item", "Cost"]]
    for key, label in [
        ("pv", "Solar PV"), ("battery", "Battery"), ("diesel", "Diesel"),
        ("bos", "Balance of System"), ("epc", "EPC"), ("land", "Land"),
    ]:
        if capex[key] > 0:
            breakdown.append([label, _fmt(capex[key], ",.0f", "$")])
    breakdown.append(["Total", _fmt(capex["hybrid_total"], ",.0f", "$")])
    t = _styled_table(breakdown, [85 * mm, 85 * mm])
    t.setStyle(TableStyle([
        ("ALIGN", (1, 0), (-1, -1), "RIGHT"),
        ("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold"),
    ]))
    elems.append(t)
    elems.append(PageBreak())

    elems.append(Paragraph("5. Cash Flow", styles["SectionHeader"]))
    cf_rows = [["Year", "Hybrid $/yr", "Diesel $/yr", "Cum. Savings"]]
    for row in f["cash_flows"]:
        year = f"{row['year']}*" if row["battery_replacement"] else str(row["year"])
        cf_rows.append([
            year,
            _fmt(row["hybrid_annual"], ",.0f", "$"),
            _fmt(row["diesel_annual"], ",.0f", "$"),
            _fmt(row["cumulative_savings"], ",.0f", "$"),
        ])
    t = _styled_table(cf_rows, [25 * mm, 48 * mm, 48 * mm, 49 * mm])
    t.setStyle(TableStyle([("ALIGN", (1, 0), (-1, -1), "RIGHT")]))
    elems.append(t)
    elems.append(Paragraph("* battery replacement year", styles["BodyText2"]))
    elems.append(Spacer(1, 4 * mm))
    elems.append(Image(_make_cashflow_chart(f["cash_flows"]), width=170 * mm, height=85 * mm))
    elems.append(PageBreak())
    return elems


# ══════════════════════════════════════════════════════════════════════
# Section 6: Environmental
# ══════════════════════════════════════════════════════════════════════

def _build_environmental(styles, data: dict) -> list:
    e = data["energy"]
    saved = e["diesel_only_fuel_litres"] - e["hybrid_fuel_litres"]
    saved_pct = (
        saved / e["diesel_only_fuel_litres"] * 100
        if e["diesel_only_fuel_litres"] > 0 else 0.0
    )

    elems: list = []
    elems.append(Paragraph("6. Environmental", styles["SectionHeader"]))
    rows = [
        ["Metric", "Value"],
        ["\u200bCO\u2082 Diesel Only", _fmt(e["co2_diesel_only_t"], ",.0f", "", " t/yr")],
        ["\u200bCO\u2082 Hybrid", _fmt(e["co2_hybrid_t"], ",.0f", "", " t/yr")],
        ["\u200bCO\u2082 Reduction", _fmt(e["co2_saved_t"], ",.0f", "", " t/yr")],
        ["Tree Equivalent", _fmt(e["trees_equivalent"], ",.0f", "", " trees")],
        ["Fuel Saved", f"{saved:,.0f} L/yr ({saved_pct:.0f}%)"],
        ["Diesel Run Hours", _fmt(e["diesel_run_hours"], ",.0f", "", " h/yr")],
    ]
    elems.append(_styled_table(rows, [85 * mm, 85 * mm]))
    return elems


# ══════════════════════════════════════════════════════════════════════
# Section 7: Sensitivity & Advisories
# ══════════════════════════════════════════════════════════════════════

def _build_sensitivity(styles, data: dict) -> list:
    sens = data["sensitivity"]
    elems: list = []
    elems.append(Paragraph("7. Sensitivity", styles["SectionHeader"]))

    rows = [["Fuel Price", "Hybrid LCOE", "Diesel LCOE", "Savings", "NPV Benefit"]]
    for p in sens["fuel_price"]:
        rows.append([
            _fmt(p["fuel_price"], ".2f", "$", "/L"),
            _fmt(p["hybrid_lcoe"], ".3f", "$"),
            _fmt(p["diesel_lcoe"], ".3f", "$"),
            _fmt_k(p["lifetime_savings"]),
            _fmt_k(p["npv_benefit"]),
        ])
    elems.append(_styled_table(rows, [34 * mm] * 5))
    elems.append(Spacer(1, 4 * mm))

    rows = [["RE Target", "PV kWp", "Battery kWh", "CAPEX"]]
    for p in sens["renewable_target"]:
        rows.append([
            f"{p['renewable_pct']:g}%",
            _fmt(p["pv_kwp"]),
            _fmt(p["battery_kwh"]),
            _fmt_k(p["capex"]),
        ])
    elems.append(_styled_table(rows, [42 * mm, 42 * mm, 43 * mm, 43 * mm]))
    return elems


def _build_advisories(styles, advisories: list[str]) -> list:
    if not advisories:
        return []
    elems: list = []
    elems.append(Paragraph("8. Advisories", styles["SectionHeader"]))
    for msg in advisories:
        elems.append(Paragraph(msg, styles["BulletItem"], bulletText="•"))
    return elems


# ══════════════════════════════════════════════════════════════════════
# Main Entry Point
# ══════════════════════════════════════════════════════════════════════

def generate_pdf_report(
    results: CalculationResults,
    project_info: dict | None = None,
) -> BytesIO:
    """Generate the feasibility report and return it as a BytesIO buffer.

    Parameters
    ----------
    results : CalculationResults
        Output of :func:`hybrid_engine.simulation.run_calculation`.
    project_info : dict or None
        Optional ``name``, ``client``, ``reference``, ``engineer``,
        ``date`` and ``revision`` shown on the cover.
    """
    info = project_info or {}
    data = results.to_dict()
    project_life = results.config.finance.project_life_years

    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        topMargin=18 * mm,
        bottomMargin=15 * mm,
        leftMargin=MARGIN,
        rightMargin=MARGIN,
        title=info.get("name") or "Hybrid Power Feasibility Report",
    )

    styles = _get_styles()
    elements: list = []
    elements.extend(_build_cover(styles, data, results, info))
    elements.extend(_build_executive_summary(styles, data, project_life))
    elements.extend(_build_system_design(styles, data, results))
    elements.extend(_build_energy(styles, data))
    elements.extend(_build_financial(styles, data))
    elements.extend(_build_environmental(styles, data))
    elements.extend(_build_sensitivity(styles, data))
    elements.extend(_build_advisories(styles, data["advisories"]))

    doc.build(elements, onFirstPage=_on_first_page, onLaterPages=_on_later_pages)
    buffer.seek(0)
    return buffer
