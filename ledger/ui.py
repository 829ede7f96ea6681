"""
Streamlit glue shared by every page: app context, auth gate, sidebar shell,
header and feedback widgets.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Optional
from urllib.parse import parse_qs, urlencode, urlsplit

import streamlit as st

from .api_client import ApiClient, ApiResponse
from .auth import AuthGate, GateDecision, GateState
from .calendar_api import CalendarApi
from .config import Settings, load_settings
from .content_api import ContentApi
from .documents_api import DocumentsApi
from .issues_api import IssuesApi
from .log import get_logger, setup_logging
from .newsletter_api import NewsletterApi
from .officials_api import OfficialsApi
from .questions_api import QuestionsApi
from .session import AuthSession, SessionStore
from .workflow import StatusStyle


logger = get_logger(__name__)

BRAND_ACCENT = "#d36530"
BRAND_TEXT = "#5e6461"
BRAND_BACKGROUND = "#f2f0e3"


@dataclass(frozen=True)
class NavItem:
    path: str
    label: str
    script: str
    icon: str


# Sidebar order
NAV_ITEMS: List[NavItem] = [
    NavItem("/", "Dashboard", "Home.py", "📊"),
    NavItem("/content", "Content", "pages/1_Content.py", "📰"),
    NavItem("/officials", "Officials", "pages/2_Officials.py", "👥"),
    NavItem("/calendar", "Calendar", "pages/3_Calendar.py", "📅"),
    NavItem("/documents", "Documents", "pages/4_Documents.py", "📁"),
    NavItem("/issues", "Issue Reports", "pages/5_Issues.py", "🚧"),
    NavItem("/questions", "Q&A", "pages/6_Questions.py", "❓"),
    NavItem("/newsletter", "Newsletter", "pages/7_Newsletter.py", "✉️"),
]

PAGE_SCRIPTS: Dict[str, str] = {item.path: item.script for item in NAV_ITEMS}
PAGE_SCRIPTS.update({
    "/profile": "pages/8_Profile.py",
    "/login": "pages/9_Login.py",
    "/official-registration": "pages/10_Official_Registration.py",
    "/privacy": "pages/11_Privacy.py",
})


def script_for(path: str) -> str:
    return PAGE_SCRIPTS.get(path, PAGE_SCRIPTS["/"])


# =============================================================================
# APP CONTEXT
# =============================================================================

@dataclass
class AppContext:
    """Everything a page needs, resolved once per run and passed explicitly."""
    path: str
    settings: Settings
    store: SessionStore
    decision: GateDecision
    client: ApiClient
    officials: OfficialsApi
    calendar: CalendarApi
    issues: IssuesApi
    questions: QuestionsApi
    newsletter: NewsletterApi
    content: ContentApi
    documents: DocumentsApi

    @property
    def session(self) -> Optional[AuthSession]:
        return self.decision.session

    @property
    def role(self) -> Optional[str]:
        return self.decision.role

    @property
    def is_admin(self) -> bool:
        return self.decision.show_navigation


def _session_store(settings: Settings) -> SessionStore:
    if "session_store" not in st.session_state:
        store = SessionStore.from_settings(settings)
        store.subscribe(_on_auth_change)
        st.session_state.session_store = store
    return st.session_state.session_store


def _api_client(settings: Settings, store: SessionStore) -> ApiClient:
    if "api_client" not in st.session_state:
        st.session_state.api_client = ApiClient(
            settings.api_base_url,
            token_provider=store.get_access_token,
            timeout=settings.request_timeout,
        )
    return st.session_state.api_client


def go(target: str) -> None:
    """Navigate to an app path such as '/login?redirect=%2Fcalendar'."""
    parts = urlsplit(target)
    query = parse_qs(parts.query)
    if "redirect" in query:
        st.session_state.login_redirect = query["redirect"][0]
    elif parts.query:
        # switch_page drops the query string; page_setup restores it
        st.session_state.pending_query = parts.query
    st.switch_page(script_for(parts.path or "/"))


def _on_auth_change(event: str, session: Optional[AuthSession]) -> None:
    path = st.session_state.get("current_path", "/")
    query = st.session_state.get("current_query", "")
    decision = AuthGate(st.session_state.session_store).on_session_change(event, session, path, query)
    st.session_state.gate_state = decision.state
    if decision.redirect_to:
        go(decision.redirect_to)


def _inject_css() -> None:
    st.markdown(f"""
    <style>
    h1, h2, h3 {{ color: {BRAND_TEXT}; }}
    .ledger-badge {{
        display: inline-block;
        padding: 0.125rem 0.625rem;
        border-radius: 9999px;
        font-size: 0.75rem;
        font-weight: 600;
    }}
    </style>
    """, unsafe_allow_html=True)


def page_setup(path: str, title: str, icon: str) -> AppContext:
    """
    Configure the page and run the auth gate.

    Redirects (and stops the script) when the gate says so; otherwise renders
    the sidebar for admins and returns the context for the page body.
    """
    st.set_page_config(
        page_title=f"{title} | Albany Ledger",
        page_icon=icon,
        layout="wide",
    )

    settings = load_settings()
    setup_logging(settings.log_level)

    pending = st.session_state.pop("pending_query", None)
    if pending:
        st.query_params.from_dict({k: v[-1] for k, v in parse_qs(pending).items()})
    query = urlencode(st.query_params.to_dict())

    st.session_state.current_path = path
    st.session_state.current_query = query
    st.session_state.gate_state = GateState.CHECKING
    store = _session_store(settings)
    decision = AuthGate(store).check(path, query)
    st.session_state.gate_state = decision.state

    if decision.redirect_to:
        go(decision.redirect_to)
        st.stop()

    client = _api_client(settings, store)
    ctx = AppContext(
        path=path,
        settings=settings,
        store=store,
        decision=decision,
        client=client,
        officials=OfficialsApi(client),
        calendar=CalendarApi(client),
        issues=IssuesApi(client),
        questions=QuestionsApi(client),
        newsletter=NewsletterApi(client),
        content=ContentApi(client),
        documents=DocumentsApi(client),
    )

    _inject_css()
    if decision.show_navigation:
        render_sidebar(ctx)
    return ctx


# =============================================================================
# SHELL
# =============================================================================

def render_sidebar(ctx: AppContext) -> None:
    with st.sidebar:
        st.markdown("## 📰 Albany Ledger")
        st.caption("Admin Panel")
        st.divider()

        for item in NAV_ITEMS:
            st.page_link(item.script, label=item.label, icon=item.icon)

        st.divider()
        if ctx.session and ctx.session.email:
            st.caption(f"Signed in as **{ctx.session.email}**")
        if st.button("🚪 Sign Out", key="sidebar_sign_out", use_container_width=True):
            sign_out(ctx)


def sign_out(ctx: AppContext) -> None:
    """Sign out; the session listener redirects to the login page."""
    st.session_state.pop("api_client", None)
    ctx.store.sign_out()
    st.rerun()


def render_header(ctx: AppContext, title: str, subtitle: Optional[str] = None) -> None:
    col_title, col_user = st.columns([5, 1])
    with col_title:
        st.title(title)
        if subtitle:
            st.markdown(subtitle)
    with col_user:
        if ctx.session is not None and not ctx.is_admin:
            if st.button("🚪 Sign Out", key="header_sign_out", use_container_width=True):
                sign_out(ctx)
    st.divider()


# =============================================================================
# FEEDBACK
# =============================================================================

def show_load_error(response: ApiResponse, what: str, key: str) -> None:
    """Error banner plus a Retry button that re-runs the page."""
    st.error(f"❌ Could not load {what}: {response.error}")
    if st.button("🔄 Retry", key=f"retry_{key}"):
        st.rerun()


def notify(response: ApiResponse, success: str, failure: str = "Request failed") -> bool:
    """Toast the outcome of a mutation; returns the success flag."""
    if response.success:
        st.toast(f"✅ {success}")
        return True
    st.toast(f"❌ {failure}: {response.error}")
    logger.warning("%s: %s", failure, response.error)
    return False


def show_field_errors(errors: Dict[str, List[str]]) -> None:
    for name, messages in errors.items():
        for message in messages:
            label = name.replace("_", " ").replace(".", " › ")
            st.error(f"**{label}**: {message}")


def badge_html(style: StatusStyle, with_icon: bool = True) -> str:
    text = f"{style.icon} {style.label}" if with_icon else style.label
    return (f'<span class="ledger-badge" style="background:{style.color};'
            f'color:{style.text_color}">{text}</span>')


def render_badge(style: StatusStyle) -> None:
    st.markdown(badge_html(style), unsafe_allow_html=True)


def color_chip_html(color: str, label: str) -> str:
    return (f'<span class="ledger-badge" style="background:{color}22;color:{color};'
            f'border:1px solid {color}">{label}</span>')


def confirm_button(label: str, key: str, prompt: str = "This cannot be undone.") -> bool:
    """Two-step destructive button; True only on the confirming click."""
    flag = f"confirm_{key}"
    if not st.session_state.get(flag):
        if st.button(label, key=key):
            st.session_state[flag] = True
            st.rerun()
        return False

    st.warning(f"⚠️ {prompt}")
    col_yes, col_no = st.columns(2)
    with col_yes:
        if st.button("Yes, continue", key=f"{key}_yes", type="primary"):
            st.session_state.pop(flag, None)
            return True
    with col_no:
        if st.button("Cancel", key=f"{key}_no"):
            st.session_state.pop(flag, None)
            st.rerun()
    return False
