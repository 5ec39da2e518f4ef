import hashlib
import textwrap

import streamlit as st
import streamlit.components.v1 as components

from config.app_metadata import (
    APP_DESCRIPTION,
    DATA_SOURCES,
    MERMAID_DIAGRAMS,
    USAGE_NOTES,
)
from config.settings import Settings


def _render_mermaid(diagram: str, height: int = 260) -> None:
    diagram = textwrap.dedent(diagram).strip()
    node_id = f"mmd-{hashlib.md5(diagram.encode('utf-8')).hexdigest()}"
    html = f"""
    <div id="{node_id}" class="mermaid">
    {diagram}
    </div>
    <script src="https://cdn.jsdelivr.net/npm/mermaid@10/dist/mermaid.min.js"></script>
    <script>
      mermaid.initialize({{ startOnLoad: false }});
      const el = document.getElementById("{node_id}");
      if (el) {{
        mermaid.run({{ nodes: [el] }});
      }}
    </script>
    """
    components.html(html, height=height, scrolling=True)


def render_about(settings: Settings, record_count: int) -> None:
    st.subheader("What this dashboard is")
    st.write(APP_DESCRIPTION)

    st.subheader("Data sources")
    for source in DATA_SOURCES:
        st.markdown(f"- {source}")
    st.caption(f"Records loaded from: {settings.data_source} ({record_count} institutions)")

    st.subheader("Using the dashboard")
    for note in USAGE_NOTES:
        st.markdown(f"- {note}")

    st.subheader("Diagrams")
    for title, diagram in MERMAID_DIAGRAMS.items():
        st.markdown(f"**{title}**")
        try:
            _render_mermaid(diagram)
        except Exception:
            st.code(diagram, language="mermaid")
