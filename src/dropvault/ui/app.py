"""Streamlit entry point: sign in / sign up / password reset."""
import streamlit as st

from dropvault.ui.api_client import APIError, get_client
from dropvault.ui.state import clear_auth, get_token, get_user_email, init_session, set_auth
from dropvault.ui.validation import run_all_checks

st.set_page_config(page_title="DropVault", page_icon="\U0001f5c4️")
init_session()

st.title("DropVault")
st.caption("Upload, organize, and share your files with confidence.")

errors = run_all_checks()
if errors:
    for err in errors:
        st.warning(err)

client = get_client()

if get_token():
    st.success(f"Signed in as {get_user_email()}")
    st.page_link("pages/1_vault.py", label="Open your vault", icon="\U0001f4c2")
    if st.button("Sign out"):
        try:
            client.logout()
        except APIError as e:
            st.error(f"Sign out failed: {e.detail}")
        clear_auth()
        st.rerun()
    st.stop()

login_tab, signup_tab, reset_tab = st.tabs(["Sign in", "Create account", "Forgot password"])

with login_tab:
    with st.form("login"):
        email = st.text_input("Email")
        password = st.text_input("Password", type="password")
        if st.form_submit_button("Sign in"):
            try:
                set_auth(client.login(email, password))
                st.rerun()
            except APIError as e:
                st.error(e.detail)

with signup_tab:
    with st.form("signup"):
        email = st.text_input("Email", key="signup_email")
        password = st.text_input("Password (6+ characters)", type="password", key="signup_password")
        if st.form_submit_button("Create account"):
            try:
                set_auth(client.signup(email, password))
                st.rerun()
            except APIError as e:
                st.error(e.detail)

with reset_tab:
    with st.form("reset"):
        email = st.text_input("Email", key="reset_email")
        if st.form_submit_button("Request reset token"):
            try:
                client.request_password_reset(email)
                st.info(
                    "If that address is registered, a reset token has been issued. "
                    "Ask your DropVault operator for it; it is valid for one hour."
                )
            except APIError as e:
                st.error(e.detail)

    with st.form("reset_confirm"):
        st.markdown("**Set new password**")
        token = st.text_input("Reset token", key="reset_token")
        new_password = st.text_input("New password (6+ characters)", type="password", key="reset_password")
        if st.form_submit_button("Set new password"):
            try:
                client.confirm_password_reset(token.strip(), new_password)
                st.success("Password updated. Sign in with your new password.")
            except APIError as e:
                st.error(e.detail)
