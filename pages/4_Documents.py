"""
Documents
Public document library: uploads, external links and categories
"""

from __future__ import annotations

import pandas as pd
import streamlit as st

from ledger.documents_api import DOCUMENT_TYPES, file_color, format_file_size
from ledger.ui import color_chip_html, confirm_button, notify, page_setup, render_header, show_load_error

ctx = page_setup("/documents", "Documents", "📁")
render_header(ctx, "📁 Documents", "Budgets, minutes, reports and links published to the public library.")

categories_response = ctx.documents.list_categories()
categories = categories_response.data if categories_response.success else []
category_by_id = {c["id"]: c for c in categories}

tab_library, tab_upload, tab_categories = st.tabs(["📚 Library", "📤 Add Document", "🏷️ Categories"])

# =============================================================================
# LIBRARY
# =============================================================================

with tab_library:
    stats_response = ctx.documents.stats()
    if stats_response.success:
        stats = stats_response.data
        col1, col2, col3 = st.columns(3)
        col1.metric("📄 Documents", stats.get("total_documents", "—"))
        col2.metric("💾 Storage", format_file_size(stats.get("total_size")))
        col3.metric("🏷️ Categories", stats.get("total_categories", len(categories)))

    col1, col2, col3 = st.columns([2, 1, 1])
    with col1:
        search = st.text_input("Search documents", placeholder="Title or description...", key="doc_search")
    with col2:
        category_filter = st.selectbox(
            "Category", [None] + list(category_by_id.keys()),
            format_func=lambda cid: "All" if cid is None else category_by_id[cid].get("display_name", cid),
            key="doc_category",
        )
    with col3:
        type_filter = st.selectbox("Type", ["All"] + list(DOCUMENT_TYPES), key="doc_type")

    with st.spinner("Loading documents..."):
        response = ctx.documents.list({
            "search": search or None,
            "category_id": category_filter,
            "document_type": None if type_filter == "All" else type_filter,
            "sort_by": "created_at",
            "sort_order": "desc",
        })

    if not response.success:
        show_load_error(response, "documents", "documents")
    elif not response.data:
        st.info("No documents found.")
    else:
        documents = response.data
        df = pd.DataFrame([{
            "Title": d.get("title"),
            "Category": category_by_id.get(d.get("category_id"), {}).get("display_name", ""),
            "Type": d.get("document_type"),
            "File": d.get("file_name") or d.get("external_url") or "",
            "Size": format_file_size(d.get("file_size")),
            "Created": (d.get("created_at") or "")[:10],
        } for d in documents])
        st.dataframe(df, use_container_width=True, hide_index=True)

        for doc in documents:
            color = file_color(doc.get("file_name"), doc.get("document_type"))
            with st.container(border=True):
                col_a, col_b = st.columns([4, 1])
                with col_a:
                    icon = "🔗" if doc.get("document_type") == "external_link" else "📄"
                    st.markdown(f"{icon} **{doc.get('title')}**")
                    ext = (doc.get("file_name") or "link").rsplit(".", 1)[-1].upper()
                    st.markdown(color_chip_html(color, ext), unsafe_allow_html=True)
                    if doc.get("description"):
                        st.caption(doc["description"])
                    url = doc.get("file_url") or doc.get("external_url")
                    if url:
                        st.markdown(f"[Open]({url})")
                with col_b:
                    if confirm_button("🗑️ Delete", key=f"doc_delete_{doc['id']}",
                                      prompt=f"Delete \"{doc.get('title')}\"?"):
                        if notify(ctx.documents.delete(doc["id"]), "Document deleted"):
                            st.rerun()

                if doc.get("document_type") == "file":
                    with st.expander("Replace file"):
                        replacement = st.file_uploader("New file", key=f"doc_file_{doc['id']}")
                        if replacement is not None and st.button("📤 Upload", key=f"doc_upload_{doc['id']}"):
                            file = (replacement.name, replacement.getvalue(), replacement.type or "application/octet-stream")
                            if notify(ctx.documents.upload_file(doc["id"], file), "File replaced"):
                                st.rerun()

# =============================================================================
# ADD DOCUMENT
# =============================================================================

with tab_upload:
    if not categories:
        st.warning("Create a category before adding documents.")
    else:
        document_type = st.radio("Document type", DOCUMENT_TYPES, horizontal=True,
                                 format_func=lambda t: "File upload" if t == "file" else "External link",
                                 key="doc_new_type")
        with st.form("doc_create"):
            title = st.text_input("Title *")
            category_id = st.selectbox("Category *", list(category_by_id.keys()),
                                       format_func=lambda cid: category_by_id[cid].get("display_name", cid))
            description = st.text_area("Description")
            if document_type == "file":
                upload = st.file_uploader("File *")
                external_url = ""
            else:
                upload = None
                external_url = st.text_input("URL *", placeholder="https://")
            submitted = st.form_submit_button("💾 Save Document", type="primary")

        if submitted:
            if not title.strip():
                st.error("Title is required")
            elif document_type == "file" and upload is None:
                st.error("Please choose a file")
            elif document_type == "external_link" and not external_url.strip():
                st.error("URL is required")
            else:
                data = {
                    "title": title.strip(),
                    "category_id": category_id,
                    "document_type": document_type,
                    "description": description.strip(),
                }
                file = None
                if upload is not None:
                    file = (upload.name, upload.getvalue(), upload.type or "application/octet-stream")
                else:
                    data["external_url"] = external_url.strip()
                if notify(ctx.documents.create(data, file), f"Added \"{data['title']}\""):
                    st.rerun()

# =============================================================================
# CATEGORIES
# =============================================================================

with tab_categories:
    if not categories_response.success:
        show_load_error(categories_response, "categories", "doc_categories")
    elif not categories:
        st.info("No categories yet.")
    else:
        ordered = sorted(categories, key=lambda c: c.get("sort_order", 0))
        for index, category in enumerate(ordered):
            with st.container(border=True):
                col_a, col_up, col_down, col_del = st.columns([5, 1, 1, 1])
                with col_a:
                    st.markdown(color_chip_html(category.get("color_hex", "#6b7280"), category.get("display_name", "")),
                                unsafe_allow_html=True)
                    if category.get("description"):
                        st.caption(category["description"])
                move = None
                with col_up:
                    if index > 0 and st.button("⬆️", key=f"cat_up_{category['id']}"):
                        move = index - 1
                with col_down:
                    if index < len(ordered) - 1 and st.button("⬇️", key=f"cat_down_{category['id']}"):
                        move = index + 1
                with col_del:
                    if confirm_button("🗑️", key=f"cat_delete_{category['id']}"):
                        if notify(ctx.documents.delete_category(category["id"]), "Category deleted"):
                            st.rerun()
                if move is not None:
                    ordered[index], ordered[move] = ordered[move], ordered[index]
                    order = [{"id": c["id"], "sort_order": i} for i, c in enumerate(ordered)]
                    if notify(ctx.documents.reorder_categories(order), "Categories reordered"):
                        st.rerun()

                with st.expander("✏️ Edit"):
                    with st.form(f"cat_edit_{category['id']}"):
                        display_name = st.text_input("Name", value=category.get("display_name", ""))
                        color_hex = st.color_picker("Color", value=category.get("color_hex", "#6b7280"))
                        description = st.text_area("Description", value=category.get("description") or "")
                        if st.form_submit_button("💾 Save"):
                            if not display_name.strip():
                                st.error("Name is required")
                            elif notify(ctx.documents.update_category(category["id"], {
                                "display_name": display_name.strip(),
                                "color_hex": color_hex,
                                "description": description.strip(),
                            }), "Category updated"):
                                st.rerun()

    with st.expander("➕ New Category"):
        with st.form("cat_create"):
            display_name = st.text_input("Name")
            color_hex = st.color_picker("Color", value="#d36530")
            description = st.text_area("Description")
            if st.form_submit_button("💾 Create Category", type="primary"):
                if not display_name.strip():
                    st.error("Name is required")
                elif notify(ctx.documents.create_category(display_name.strip(), color_hex, description.strip(),
                                                          sort_order=len(categories)), "Category created"):
                    st.rerun()
