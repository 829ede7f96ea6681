from __future__ import annotations

import pandas as pd

from ledger.auth import ADMIN_ONLY_PATHS, PUBLIC_PATHS
from ledger.ui import NAV_ITEMS, PAGE_SCRIPTS, badge_html, script_for
from ledger.widgets import editor_rows
from ledger.workflow import issue_status_style


def test_every_gated_path_has_a_page():
    assert ADMIN_ONLY_PATHS | PUBLIC_PATHS | {"/profile", "/calendar"} == set(PAGE_SCRIPTS)
    assert [item.path for item in NAV_ITEMS][0] == "/"


def test_script_for_unknown_path_is_dashboard():
    assert script_for("/calendar") == "pages/3_Calendar.py"
    assert script_for("/nowhere") == "Home.py"


def test_badge_html_uses_style_colors():
    html = badge_html(issue_status_style("resolved"))
    assert "background:#dcfce7" in html
    assert "✅ Resolved" in html
    assert "Resolved" in badge_html(issue_status_style("resolved"), with_icon=False)


def test_editor_rows_drop_blank_rows_and_nan_cells():
    df = pd.DataFrame([
        {"id": "e1", "title": "Principal", "organization": "Albany High"},
        {"id": None, "title": float("nan"), "organization": ""},
        {"id": None, "title": "Aide", "organization": float("nan")},
    ])
    rows = editor_rows(df)
    assert rows == [
        {"id": "e1", "title": "Principal", "organization": "Albany High"},
        {"id": None, "title": "Aide", "organization": None},
    ]
