"""
Q&A
Resident questions and official answers
"""

from __future__ import annotations

import pandas as pd
import streamlit as st

from ledger.ui import confirm_button, notify, page_setup, render_badge, render_header, show_load_error
from ledger.workflow import QUESTION_STATUSES, answer_question, can_answer, question_status_style

ctx = page_setup("/questions", "Q&A", "❓")
render_header(ctx, "❓ Questions & Answers", "Answer questions submitted by residents.")

categories_response = ctx.questions.list_categories()
categories = categories_response.data if categories_response.success else []
category_names = {c["id"]: c.get("name", str(c["id"])) for c in categories}

col1, col2, col3 = st.columns([2, 1, 1])
with col1:
    search = st.text_input("Search", placeholder="Question text or tracking id...", key="question_search")
with col2:
    status_filter = st.selectbox("Status", ["All"] + QUESTION_STATUSES,
                                 format_func=lambda s: s if s == "All" else question_status_style(s).label,
                                 key="question_status")
with col3:
    category_filter = st.selectbox("Category", [None] + list(category_names.keys()),
                                   format_func=lambda c: "All" if c is None else category_names[c],
                                   key="question_category")

with st.spinner("Loading questions..."):
    response = ctx.questions.list({
        "search": search or None,
        "status": None if status_filter == "All" else status_filter,
        "category_id": category_filter,
        "sort_by": "created_at",
        "sort_order": "desc",
    })

if not response.success:
    show_load_error(response, "questions", "questions")
    st.stop()

questions = response.data["questions"]
if not questions:
    st.info("No questions match these filters.")
    st.stop()

pending = sum(1 for q in questions if q.status == "pending")
st.caption(f"{response.data['total']} questions • {pending} pending on this page")

df = pd.DataFrame([{
    "ID": q.short_id,
    "Question": q.question[:100],
    "Status": question_status_style(q.status).label,
    "Category": q.category_name or category_names.get(q.category_id, ""),
    "From": q.submitter,
    "Asked": q.created_at.strftime("%Y-%m-%d") if q.created_at else "",
} for q in questions])
st.dataframe(df, use_container_width=True, hide_index=True)

by_id = {q.id: q for q in questions}
selected_id = st.selectbox("Open question", list(by_id.keys()),
                           format_func=lambda i: f"#{by_id[i].short_id} — {by_id[i].question[:60]}",
                           key="question_selected")
question = by_id[selected_id]

st.divider()
render_badge(question_status_style(question.status))
st.markdown(f"### {question.question}")
st.caption(f"#{question.short_id} • {question.category_name or 'General'} • asked by {question.submitter}"
           f"{' <' + question.submitter_email + '>' if question.submitter_email and not question.is_anonymous else ''}")

if question.answer:
    st.markdown("**Answer**")
    st.info(question.answer)
    if question.answered_at:
        st.caption(f"Answered {question.answered_at.strftime('%b %d, %Y %I:%M %p')}")

if can_answer(question):
    with st.form(f"answer_{question.id}"):
        answer = st.text_area("Your answer *", height=200)
        if st.form_submit_button("📨 Publish Answer", type="primary"):
            result = answer_question(ctx.questions, question, answer)
            if notify(result, "Answer published", failure="Could not publish answer"):
                st.rerun()

if confirm_button("🗑️ Delete question", key=f"question_delete_{question.id}",
                  prompt="Delete this question? This cannot be undone."):
    if notify(ctx.questions.delete(question.id), "Question deleted"):
        st.rerun()
