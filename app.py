import logging
import streamlit as st
from dotenv import load_dotenv
from legallens.utils.config import AppConfig
from legallens.utils.errors import IntakeError
from legallens.utils.logs import configure_logging
from legallens.ui.components import sidebar, clauses_tab, chat_tab, export_tab
from legallens.store.document_store import DocumentStore
from legallens.analysis.clauses import ClauseClassifier
from legallens.analysis.pipeline import analyze_pasted, analyze_upload
from legallens.qa.chat import ChatAssistant

load_dotenv()
config = AppConfig.from_env()
configure_logging(config.log_level)
logger = logging.getLogger("legallens.app")

st.set_page_config(page_title="LegalLens", layout="wide", page_icon="⚖️")

if 'store' not in st.session_state:
    st.session_state.store = DocumentStore()
if 'classifier' not in st.session_state:
    st.session_state.classifier = ClauseClassifier(config)
if 'assistant' not in st.session_state:
    st.session_state.assistant = ChatAssistant(config)
if 'intake_error' not in st.session_state:
    st.session_state.intake_error = None
if 'uploader_key' not in st.session_state:
    st.session_state.uploader_key = 0

store: DocumentStore = st.session_state.store
classifier: ClauseClassifier = st.session_state.classifier

sidebar(config, store, remote_enabled=classifier.llm is not None)

st.markdown("<h2 style='margin-top:0;'>⚖️ LegalLens</h2>", unsafe_allow_html=True)
st.caption("Upload or paste a legal document to get a plain-English, clause-by-clause breakdown with risk levels.")

uploaded_file = st.file_uploader(
    "Upload a legal document",
    type=["pdf", "txt"],
    accept_multiple_files=False,
    key=f"uploader{st.session_state.uploader_key}",
    help=f"PDF or plain text, up to {config.max_upload_mb}MB.",
)
pasted = st.text_area("Or paste your text directly", height=180, placeholder="Paste your legal document text here...")

cols = st.columns([1, 1])
with cols[0]:
    analyze_clicked = st.button("🚀 Analyze", type="primary", use_container_width=True)
with cols[1]:
    reset_clicked = st.button("♻️ Reset", use_container_width=True)

if reset_clicked:
    st.session_state.clear()
    st.rerun()

if analyze_clicked:
    st.session_state.intake_error = None
    try:
        with st.spinner("Analyzing clauses..."):
            if uploaded_file is not None:
                document = analyze_upload(config, uploaded_file.name, uploaded_file.getvalue(),
                                          uploaded_file.type, classifier=classifier)
            else:
                document = analyze_pasted(config, pasted, classifier=classifier)
        # publish only the finished document
        store.replace(document)
        st.success(f"Analysis complete: {len(document.clauses)} clause(s) found.")
    except IntakeError as e:
        logger.info("Intake rejected: %s", e.message)
        st.session_state.intake_error = e.message

if st.session_state.intake_error:
    st.error(f"Upload Error: {st.session_state.intake_error}")
    if st.button("Try again →"):
        st.session_state.intake_error = None
        st.session_state.uploader_key += 1
        st.rerun()

clauses_ui, chat_ui, export_ui = st.tabs(["Clauses", "Ask Questions", "Export"])

with clauses_ui:
    clauses_tab(store.document)
with chat_ui:
    chat_tab(config, store, st.session_state.assistant)
with export_ui:
    export_tab(store, meta={
        "app": "LegalLens",
        "version": "0.1.0",
        "use_gemini": classifier.llm is not None,
        "model": config.gemini_model,
        "splitter": config.splitter_strategy,
    })

st.markdown("<div style='text-align:center;font-size:.65rem;opacity:.6;padding:1rem 0;'>Not legal advice. For informational purposes only.</div>", unsafe_allow_html=True)
