import time

import streamlit as st

from dropvault.config import settings
from dropvault.ui.api_client import APIError, get_client
from dropvault.ui.formatting import file_icon, format_file_size
from dropvault.ui.state import (
    dismiss_upload, get_token, get_upload_session, init_session,
    pop_notices, pump_uploads, stage_uploads,
)
from dropvault.uploads.tracker import EntryStatus

init_session()
st.title("Your Vault")

if not get_token():
    st.error("Please sign in first.")
    st.stop()

client = get_client()
session = get_upload_session()
pump_uploads()

# --- Uploader ---
uploaded_files = st.file_uploader(
    "Drag and drop your files here, or click to browse",
    accept_multiple_files=True,
    key=f"uploader_{st.session_state['uploader_key']}",
    help=f"Maximum file size: {format_file_size(settings.MAX_UPLOAD_BYTES)}",
)

if uploaded_files:
    stage_uploads(uploaded_files)
    # Clear the widget so the same selection is not ingested twice
    st.session_state["uploader_key"] += 1
    st.rerun()

for kind, message in pop_notices():
    st.toast(message, icon="✅" if kind == "success" else "❌")

# --- In-flight uploads ---
for entry in session.entries():
    with st.container(border=True):
        c1, c2 = st.columns([10, 1])
        if entry.status is EntryStatus.ERROR:
            c1.error(f"**{entry.name}**: {entry.error_message}")
            if c2.button("✕", key=f"dismiss_err_{entry.name}", help="Dismiss error"):
                dismiss_upload(entry.name)
                st.rerun()
            continue

        c1.write(f"{file_icon(entry.mime_type)} **{entry.name}** · {format_file_size(entry.size_bytes)}")
        if entry.status is EntryStatus.COMPLETE:
            c1.progress(100, text="✔ Upload complete")
        else:
            c1.progress(int(entry.progress), text=f"{round(entry.progress)}% uploaded")
        if c2.button("✕", key=f"dismiss_{entry.name}", help="Remove file"):
            dismiss_upload(entry.name)
            st.rerun()

st.divider()

# --- List Files ---
st.subheader("Your Files")
try:
    file_list = client.list_files(limit=100)
except APIError as e:
    st.error(f"Failed to load files: {e.detail}")
    st.stop()

if not file_list.items:
    st.info("No files uploaded.")
else:
    st.write(f"Total Files: {file_list.total}")
    for f in file_list.items:
        with st.container(border=True):
            c1, c2, c3, c4 = st.columns([4, 2, 1, 1])
            c1.write(f"{file_icon(f.mime_type)} **{f.name}**")
            c2.write(format_file_size(f.size_bytes))
            if c3.button("⬇", key=f"get_{f.id}", help="Prepare download"):
                try:
                    st.session_state[f"download_{f.id}"] = client.download_file(f.id)
                except APIError as e:
                    st.error(f"Download failed: {e.detail}")
            if f"download_{f.id}" in st.session_state:
                c3.download_button(
                    "Save", st.session_state[f"download_{f.id}"],
                    file_name=f.name, mime=f.mime_type, key=f"save_{f.id}",
                )
            if c4.button("\U0001f5d1", key=f"del_{f.id}", help="Delete file"):
                try:
                    client.delete_file(f.id)
                    st.session_state.pop(f"download_{f.id}", None)
                    st.toast(f"Deleted {f.name}")
                    st.rerun()
                except APIError as e:
                    st.error(f"Failed to delete {f.name}: {e.detail}")

# Keep ticking while any upload is still in flight
if session.has_pending():
    time.sleep(settings.UPLOAD_TICK_INTERVAL)
    st.rerun()
