from __future__ import annotations
import html
import streamlit as st
import pandas as pd
from datetime import datetime
from typing import List
from legallens.utils.config import AppConfig
from legallens.utils.errors import NoActiveDocument
from legallens.utils.types import Clause, Document
from legallens.store.document_store import DocumentStore
from legallens.qa.chat import ChatAssistant
from legallens.report.text_export import build_analysis_text, export_filename, sort_by_risk
from legallens.report.json_export import build_analysis_json

RISK_COLORS = {"high": "#FF4B4B", "medium": "#FFB347", "low": "#4CAF50"}

GLOBAL_CSS = """
<style>
.clause-card { border:1px solid #2e3442; border-radius:12px; padding:.65rem .85rem; margin-bottom:.6rem; }
.clause-head { display:flex; gap:.5rem; align-items:center; }
.risk-tag { font-size:.6rem; letter-spacing:.5px; text-transform:uppercase; padding:2px 6px; border-radius:6px; color:#111; }
.chat-q { background:#252d3a; padding:10px 14px; border-radius:12px; margin-bottom:4px; font-weight:600; }
.chat-a { background:#1d2330; padding:10px 14px; border-left:3px solid #6A5ACD; border-radius:0 12px 12px 12px; margin-bottom:6px; }
.chat-ts { font-size:.55rem; opacity:.6; }
</style>
"""


def _esc(text: str) -> str:
    return html.escape(text).replace("\n", "<br>")


def sidebar(config: AppConfig, store: DocumentStore, remote_enabled: bool):
    st.markdown(GLOBAL_CSS, unsafe_allow_html=True)
    st.sidebar.markdown("### ⚖️ LegalLens")
    st.sidebar.caption("Clause breakdown • risk levels • document-grounded chat")
    doc = store.document
    st.sidebar.metric("Mode", "Gemini" if remote_enabled else "Offline heuristics")
    st.sidebar.metric("Clauses", len(doc.clauses) if doc else 0)
    st.sidebar.metric("Chat turns", len(store.conversation))
    st.sidebar.caption(f"Uploads up to {config.max_upload_mb}MB • PDF or TXT")
    st.sidebar.markdown("<div style='font-size:.6rem;opacity:.6;'>Not legal advice. For informational purposes only.</div>", unsafe_allow_html=True)


def clause_frame(clauses: List[Clause]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {"Clause": c.id, "Category": c.category, "Risk": c.risk_level.capitalize(),
             "Key points": len(c.key_points), "Risks": len(c.risks)}
            for c in clauses
        ],
        columns=["Clause", "Category", "Risk", "Key points", "Risks"],
    )


def clauses_tab(document: Document | None):
    if not document:
        st.info("Upload a document or paste its text, then click 'Analyze' to begin.")
        return
    clauses = list(document.clauses)
    high = sum(1 for c in clauses if c.risk_level == "high")
    medium = sum(1 for c in clauses if c.risk_level == "medium")
    cols = st.columns(3)
    cols[0].metric("Total clauses", len(clauses))
    cols[1].metric("High / Medium risk", f"{high} / {medium}")
    cols[2].metric("Low risk", len(clauses) - high - medium)
    if clauses:
        st.dataframe(clause_frame(clauses), use_container_width=True, hide_index=True)

    search_col, risk_col = st.columns([2, 1])
    with search_col:
        search = st.text_input("Search clauses", placeholder="keyword or category...")
    with risk_col:
        risk_filter = st.multiselect("Risk", ["high", "medium", "low"], default=["high", "medium", "low"], label_visibility="collapsed")
    count = 0
    for c in sort_by_risk(clauses):
        if search:
            blob = f"{c.category} {c.explanation} {c.original_text} {' '.join(c.key_points)}".lower()
            if search.lower() not in blob:
                continue
        if c.risk_level not in risk_filter:
            continue
        count += 1
        color = RISK_COLORS.get(c.risk_level, "#455263")
        st.markdown(
            f"""
            <div class='clause-card' style='border-left:5px solid {color};'>
              <div class='clause-head'>
                 <span class='risk-tag' style='background:{color};'>{c.risk_level} risk</span>
                 <strong>{_esc(c.category)}</strong>
              </div>
              <div style='margin-top:4px;font-size:.8rem;'>{_esc(c.explanation)}</div>
            </div>
            """,
            unsafe_allow_html=True,
        )
        with st.expander("Details"):
            if c.key_points:
                st.markdown("**Key points**\n" + "\n".join(f"- {p}" for p in c.key_points))
            if c.risks:
                st.markdown("**Risks**\n" + "\n".join(f"- ⚠️ {r}" for r in c.risks))
            if c.risk_details:
                st.caption(c.risk_details)
            st.text(c.original_text)
    st.caption(f"{count} clause(s) shown")
    with st.expander("Full document text"):
        st.text(document.raw_text)


def chat_tab(config: AppConfig, store: DocumentStore, assistant: ChatAssistant):
    st.write("Ask questions about the analyzed document.")
    document = store.document
    if not document:
        st.info("Analyze a document first to start chatting.")
        return
    with st.form("chat_form", clear_on_submit=True):
        question = st.text_input("Your question", placeholder="e.g., Can I terminate early?", key="chat_input")
        col1, col2 = st.columns([1, 1])
        with col1:
            submitted = st.form_submit_button("Ask", use_container_width=True)
        with col2:
            clear_hist = st.form_submit_button("Clear conversation", use_container_width=True)
    if clear_hist:
        store.clear_conversation()
    if submitted and question.strip():
        history = store.recent_turns(config.chat_history_limit)
        try:
            store.add_turn("user", question.strip())
            with st.spinner("Thinking..."):
                answer = assistant.reply(question.strip(), document, history)
            store.add_turn("assistant", answer)
        except NoActiveDocument as e:
            st.warning(str(e))
    turns = store.conversation
    for turn in reversed(turns):
        ts = datetime.fromtimestamp(turn.timestamp).strftime("%H:%M")
        css = "chat-q" if turn.role == "user" else "chat-a"
        st.markdown(f"<div class='{css}'>{_esc(turn.content)} <span class='chat-ts'>{ts}</span></div>", unsafe_allow_html=True)


def export_tab(store: DocumentStore, meta: dict):
    document = store.document
    if not document:
        st.info("Exports will be available after analysis.")
        return
    report = build_analysis_text(document)
    st.download_button("📄 Download text report", data=report, file_name=export_filename(), mime="text/plain")
    blob = build_analysis_json(document, store.conversation, meta)
    st.download_button("🗂️ Download JSON snapshot", data=blob, file_name="analysis_snapshot.json", mime="application/json")
    with st.expander("Preview report"):
        st.text(report)
