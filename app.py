import json
import logging

import pandas as pd
import streamlit as st

# --- MODULE IMPORTS ---
from labreport.config import Config, InstituteConfig, ReportConfig
from labreport.errors import ReportDataError, ReportGenerationError
from labreport.reporting import plan_report, report_from_dict, load_report
from labreport.reporting.pdf import generate_report_pdf, report_filename

logging.basicConfig(
    level=getattr(logging, Config.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("labreport.App")

st.set_page_config(page_title=Config.APP_TITLE, layout=Config.APP_LAYOUT, page_icon="📄")
st.title(Config.APP_TITLE)


def _load_selected_report():
    """Report from the uploaded file, else from the reports directory."""
    uploaded_file = st.sidebar.file_uploader("Report JSON", type=["json"])
    if uploaded_file is not None:
        try:
            return report_from_dict(json.loads(uploaded_file.getvalue().decode("utf-8")))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise ReportDataError(f"Cannot read {uploaded_file.name}: {e}") from e

    saved = sorted(Config.REPORTS_DIR.glob("*.json")) if Config.REPORTS_DIR.exists() else []
    if not saved:
        return None
    choice = st.sidebar.selectbox("Saved reports", saved, format_func=lambda p: p.name)
    return load_report(choice) if choice else None


# ===== REPORT SELECTION =====
st.sidebar.header("📂 Report")
try:
    report = _load_selected_report()
except ReportDataError as e:
    logger.warning("[App] %s", e)
    st.error(str(e))
    st.stop()

if report is None:
    st.info("Upload a report JSON to generate its PDF.")
    st.stop()

report_plan = plan_report(report)

# ===== SUMMARY =====
col_client, col_samples, col_pages = st.columns(3)
col_client.metric("Client", report.client.name or "-")
col_samples.metric("Samples", len(report.samples))
col_pages.metric("Total Pages", report_plan.total_pages)

sections_df = pd.DataFrame(
    [
        {"Sample type": s.sample_type.value, "Section": s.kind.value, "Pages": s.pages_needed}
        for s in report_plan.sections
    ]
)
if not sections_df.empty:
    st.dataframe(sections_df, use_container_width=True, hide_index=True)
if not report_plan.include_invoice:
    st.caption("Invoice is not included for government soil reports.")

# ===== PDF EXPORT =====
pdf_key = f"pdf_{report.id}"
if st.button("Generate PDF", type="primary"):
    with st.spinner("Rendering pages..."):
        try:
            st.session_state[pdf_key] = generate_report_pdf(
                report,
                InstituteConfig.from_env(),
                output_dir=Config.OUTPUT_DIR,
                config=ReportConfig(),
            )
        except ReportGenerationError as e:
            st.session_state.pop(pdf_key, None)
            st.error(f"Error generating PDF: {e}")

if pdf_key in st.session_state:
    st.download_button(
        label="📥 Download PDF",
        data=st.session_state[pdf_key],
        file_name=report_filename(report),
        mime="application/pdf",
        type="primary",
    )
