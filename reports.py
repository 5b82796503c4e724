import io
from datetime import datetime, timedelta, timezone

from fpdf import FPDF
from fpdf.enums import XPos, YPos

DAY_NAMES = ['Mon', 'Tue', 'Wed', 'Thu', 'Fri', 'Sat', 'Sun']


def format_minutes(total_minutes):
    if total_minutes is None:
        return "--"
    total_minutes = max(0, int(total_minutes))
    hours = total_minutes // 60
    minutes = total_minutes % 60
    return f"{hours}:{minutes:02d}"


def session_minutes(session):
    # Finished sessions count their real length, open ones their planned one
    if session.start_time is not None and session.end_time is not None:
        return max(int((session.end_time - session.start_time) / 60000), 0)
    return session.duration or 0


def daily_rows(sessions, start_date, end_date):
    by_day = {}
    for session in sessions:
        day = datetime.fromtimestamp(session.start_time / 1000, tz=timezone.utc).date()
        row = by_day.setdefault(day, {"sessions": 0, "focus": 0, "breaks": 0})
        row["sessions"] += 1
        if session.type == "FOCUS":
            row["focus"] += session_minutes(session)
        else:
            row["breaks"] += session_minutes(session)

    rows = []
    day = start_date
    while day <= end_date:
        if day in by_day:
            totals = by_day[day]
            rows.append({
                "date": f"{DAY_NAMES[day.weekday()]} {day.strftime('%d.%m.%Y')}",
                "date_raw": day.isoformat(),
                "sessions": totals["sessions"],
                "focus": totals["focus"],
                "breaks": totals["breaks"],
            })
        day += timedelta(days=1)
    return rows


def add_pomodoro_table(pdf, rows):
    col_widths = [55, 35, 50, 50]
    headers = ["Date", "Sessions", "Focus", "Breaks"]

    def render_header():
        pdf.set_fill_color(30, 41, 59) # Slate 800
        pdf.set_text_color(255, 255, 255)
        pdf.set_font("Helvetica", style="B", size=10)
        for idx, header in enumerate(headers):
            pdf.cell(col_widths[idx], 10, header, border=0, align="C", fill=True)
        pdf.ln(10)
        pdf.set_text_color(0, 0, 0)

    render_header()

    if not rows:
        pdf.set_font("Helvetica", size=10)
        pdf.cell(sum(col_widths), 10, "No sessions in selected period.", border=1, align="L")
        pdf.ln(10)
        return

    for idx, row in enumerate(rows):
        pdf.set_font("Helvetica", size=10)
        if idx % 2 == 0:
            pdf.set_fill_color(255, 255, 255)
        else:
            pdf.set_fill_color(252, 252, 252)

        pdf.cell(col_widths[0], 9, row["date"], border="B", align="L", fill=True)
        pdf.cell(col_widths[1], 9, str(row["sessions"]), border="B", align="R", fill=True)
        pdf.cell(col_widths[2], 9, format_minutes(row["focus"]), border="B", align="R", fill=True)
        pdf.cell(col_widths[3], 9, format_minutes(row["breaks"]), border="B", align="R", fill=True)
        pdf.ln(9)

        if pdf.get_y() > 260:
            pdf.add_page()
            render_header()

    pdf.set_fill_color(248, 250, 252) # Slate 50
    pdf.set_font("Helvetica", style="B", size=10)
    pdf.cell(col_widths[0], 9, "Total", border=1, align="L", fill=True)
    pdf.cell(col_widths[1], 9, str(sum(r["sessions"] for r in rows)), border=1, align="R", fill=True)
    pdf.cell(col_widths[2], 9, format_minutes(sum(r["focus"] for r in rows)), border=1, align="R", fill=True)
    pdf.cell(col_widths[3], 9, format_minutes(sum(r["breaks"] for r in rows)), border=1, align="R", fill=True)
    pdf.ln(9)


def build_pomodoro_report(sessions, start_date, end_date, reporter_name):
    pdf = FPDF()
    pdf.set_auto_page_break(auto=True, margin=15)
    pdf.add_page()

    # core fonts only cover latin-1
    reporter_name = (reporter_name or "").encode("latin-1", "replace").decode("latin-1")
    pdf.set_font("Helvetica", size=11)
    pdf.cell(0, 8, reporter_name, new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.ln(2)

    pdf.set_font("Helvetica", style="B", size=16)
    pdf.cell(0, 10, "Pomodoro report", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.set_font("Helvetica", size=10)
    pdf.set_text_color(100, 100, 100)
    pdf.cell(0, 6, f"Period: {start_date.isoformat()} to {end_date.isoformat()}", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.ln(6)
    pdf.set_text_color(0, 0, 0)

    add_pomodoro_table(pdf, daily_rows(sessions, start_date, end_date))

    pdf_bytes = pdf.output()
    pdf_stream = io.BytesIO(pdf_bytes if isinstance(pdf_bytes, (bytes, bytearray)) else pdf_bytes.encode("latin-1"))
    pdf_stream.seek(0)
    return pdf_stream
