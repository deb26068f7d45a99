from __future__ import annotations

import html

import markdown

from .models import ChatMessage

USER_LABEL = "You"
USER_COLOR = "#2f6fd0"
ASSISTANT_COLOR = "#7a7a7a"
MARKDOWN_EXTENSIONS = ["fenced_code", "tables", "nl2br"]


def render_message_html(message: ChatMessage, assistant_label: str = "AI") -> str:
    """Return the transcript HTML fragment for a single chat bubble."""

    if message.role == "user":
        role_label = USER_LABEL
        color = USER_COLOR
        # ユーザ入力は Markdown として解釈せずそのまま表示する
        content = html.escape(message.content).replace("\n", "<br>")
        align = "right"
    else:
        role_label = assistant_label
        color = ASSISTANT_COLOR
        content = markdown.markdown(message.content, extensions=MARKDOWN_EXTENSIONS)
        # QTextEdit の挿入する段落と競合しないよう外側の <p> を外す
        if content.startswith("<p>") and content.endswith("</p>") and content.count("<p>") == 1:
            content = content[3:-4]
        align = "left"

    if content.strip().endswith(("</ul>", "</ol>")):
        content += '<div style="height:0; line-height:0; margin:0; padding:0;"></div>'

    role_html = (
        f'<p style="margin-bottom:0px;" align="{align}">'
        f'<b style="color:{color}">{html.escape(role_label)}</b></p>'
    )
    return f'<div style="margin-bottom: 10px;" align="{align}">{role_html}{content}</div>'
