import os
import time
import streamlit as st
import requests
import uuid
import pandas as pd
from dotenv import load_dotenv

from compliai.export import is_passing, issues_by_severity, score_band
from compliai.models import ComplianceReport
from compliai.regulations import RegulationId

load_dotenv()

# ── configurable via .env ──
API_BASE = os.getenv("API_BASE")
ANALYZE_TIMEOUT = int(os.getenv("ANALYZE_TIMEOUT"))

REGULATIONS = {r.value: f"{r.label} ({r.full_name})" for r in RegulationId}
SEVERITY_COLORS = {"high": "#FFB6C1", "medium": "#FFD700", "low": "#ADD8E6"}

st.set_page_config(page_title="CompliAI", page_icon="🛡️", layout="wide")
st.title("🛡️ CompliAI Compliance Checker")

API = st.sidebar.text_input("API URL", API_BASE)

if "session" not in st.session_state:
    st.session_state.session = str(uuid.uuid4())
    st.session_state.result = None


def pick_regulations(key: str) -> list[str]:
    st.markdown("**Select regulations to check against:**")
    return [r for r, label in REGULATIONS.items() if st.checkbox(label, key=f"{key}-{r}")]


def call(method: str, path: str, **kwargs):
    """Request to the backend; shows an error and returns None on transport failure."""
    try:
        return requests.request(method, f"{API}{path}", timeout=ANALYZE_TIMEOUT, **kwargs)
    except requests.exceptions.Timeout:
        st.error("Request timed out. The LLM may be slow — try increasing ANALYZE_TIMEOUT.")
    except requests.exceptions.ConnectionError:
        st.error("Cannot connect to backend. Is the server running?")
    return None


def run(path: str, payload: dict):
    progress = st.progress(0, text="Sending to backend...")
    progress.progress(30, text="Checking compliance (this may take a minute)...")
    resp = call("POST", path, json={"session_id": st.session_state.session, **payload})
    progress.empty()
    if resp is None:
        return
    if resp.status_code == 400:
        st.warning(resp.json()["detail"])
        return
    if not resp.ok:
        st.error(f"Error: {resp.status_code} — {resp.text}")
        return
    st.session_state.result = resp.json()["state"]


def show_report(key: str):
    state = st.session_state.result
    if not state:
        st.info("No compliance report generated yet. Enter your document text and check compliance to generate a report.")
        return
    if state["status"] == "failed":
        st.error(state["message"])
        return
    report = ComplianceReport.model_validate(state["report"])
    score = report.score
    if is_passing(score):
        st.success(f"Compliance Check Passed — overall compliance score: {score}%")
    else:
        st.error(f"Compliance Issues Detected — overall compliance score: {score}%")
    st.caption(f"Generated {report.timestamp} · score band: {score_band(score)}")
    st.markdown(f"**Summary**\n\n{report.summary}")

    st.markdown(f"**Issues Found ({len(report.issues)})**")
    if report.issues:
        df = pd.DataFrame([{
            "Severity": i.severity.upper(),
            "Description": i.description,
            "Recommendation": i.recommendation,
        } for group in issues_by_severity(report).values() for i in group])

        def color(val):
            return f"background-color: {SEVERITY_COLORS.get(val.lower(), '#FFFFFF')}"

        st.dataframe(df.style.map(color, subset=["Severity"]), hide_index=True, use_container_width=True)

    resp = call("GET", f"/sessions/{st.session_state.session}/report.txt")
    if resp is not None and resp.ok:
        filename = resp.headers.get("content-disposition", "").split("filename=")[-1].strip('"')
        st.download_button("Download Report", resp.text, file_name=filename or "compliance-report.txt",
                           key=f"{key}-download")

    if st.button("New Analysis", key=f"{key}-reset"):
        if call("POST", f"/sessions/{st.session_state.session}/reset") is not None:
            st.session_state.result = None
            st.rerun()


tab1, tab2, tab3 = st.tabs(["📄 Compliance Check", "🧭 Guided Assessment", "🔑 API Settings"])

# Tab 1: Document check
with tab1:
    text = st.text_area("Enter document text to check for compliance:", height=220,
                        placeholder="Paste your document text here...")
    regs = pick_regulations("check")
    if st.button("Check Compliance"):
        run("/analyze", {"document_text": text, "regulations": regs})
    show_report("check")

# Tab 2: Questionnaire
with tab2:
    regs = pick_regulations("assess")
    data_handling = st.text_area("Data Handling Procedures",
                                 placeholder="Describe how your organization collects, processes, and stores user data...")
    security = st.text_area("Security Measures",
                            placeholder="Describe the security measures protecting sensitive data...")
    vendors = st.text_area("Vendor Management",
                           placeholder="Describe how you evaluate vendor compliance...")
    if st.button("Submit Assessment"):
        run("/assessment", {
            "regulations": regs,
            "data_handling": data_handling,
            "security_measures": security,
            "vendor_management": vendors,
        })
    show_report("assess")

# Tab 3: Credential
with tab3:
    key = st.text_input("OpenRouter API Key", type="password", placeholder="Enter your OpenRouter API key")
    if st.button("Save API Key"):
        resp = call("PUT", "/settings/api-key", json={"api_key": key})
        if resp is None:
            st.stop()
        if resp.ok:
            with st.spinner("Saving..."):
                time.sleep(0.3)
            st.success("Your OpenRouter API key has been saved successfully.")
        else:
            st.error(resp.json().get("detail", resp.text))
