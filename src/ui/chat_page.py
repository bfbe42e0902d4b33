"""NiceGUI chat interface backed by ChatSession."""

from nicegui import events, ui

from src.gateway.model_map import ADVERTISED_MODELS, UNIMPLEMENTED_MODELS
from src.models.schemas import FileAttachment, Message
from src.ui.formatting import markdown_to_html, plain_to_html
from src.ui.session import ChatSession, SessionState

MODEL_LABELS = {
    "gemini-2.5-pro": "Gemini 2.5 Pro",
    "claude-3": "Claude 3",
    "gpt-4": "GPT-4",
}


def model_options() -> dict[str, str]:
    """Selector labels; models served by the fallback say so."""
    options = {}
    for model in ADVERTISED_MODELS:
        label = MODEL_LABELS.get(model, model)
        if model in UNIMPLEMENTED_MODELS:
            label = f"{label} (served by GPT-4)"
        options[model] = label
    return options


CUSTOM_CSS = """
<link href="https://fonts.googleapis.com/css2?family=Inter:wght@300;400;500;600&display=swap"
      rel="stylesheet">
<style>
    * { font-family: 'Inter', sans-serif; }

    body { background: #000; min-height: 100vh; }

    .message-user { background: #27272a; color: white; border-radius: 0.5rem; }

    .message-assistant {
        background: #18181b;
        color: white;
        border: 1px solid #27272a;
        border-radius: 0.5rem;
    }

    .chip {
        background: rgba(24, 24, 27, 0.5);
        color: #a1a1aa;
        border-radius: 0.25rem;
    }

    .typing-dot {
        width: 8px; height: 8px;
        background: #d97706;
        border-radius: 50%;
        animation: bounce 1.4s infinite ease-in-out;
    }
    .typing-dot:nth-child(2) { animation-delay: 0.2s; }
    .typing-dot:nth-child(3) { animation-delay: 0.4s; }

    @keyframes bounce {
        0%, 60%, 100% { transform: translateY(0); }
        30% { transform: translateY(-6px); }
    }

    .input-box {
        background: #18181b;
        border: 1px solid #3d3d3d;
        border-radius: 1rem;
        transition: border-color 0.2s;
    }
    .input-box:focus-within { border-color: #d97706; }

    .message-assistant strong { font-weight: 600; }
    .message-assistant em { font-style: italic; }
    .message-assistant code { font-family: 'Menlo', 'Monaco', monospace; }
</style>
"""


def show_alert(text: str) -> None:
    """Blocking modal alert, dismissed with OK."""
    with ui.dialog().props("persistent") as dialog, ui.card().classes("bg-zinc-900 text-white"):
        ui.label(text).classes("text-sm")
        with ui.row().classes("w-full justify-end"):
            ui.button("OK", on_click=dialog.close).props("flat color=orange")
    dialog.open()


@ui.page("/")
def chat_page() -> None:
    """Main chat page."""
    ui.add_head_html(CUSTOM_CSS)
    ui.dark_mode().enable()

    messages_container: ui.column
    attachments_row: ui.row
    input_field: ui.textarea
    send_btn: ui.button
    model_select: ui.select

    def render_attachment_chip(attachment, on_remove=None) -> None:
        with ui.row().classes("chip items-center gap-2 px-2 py-1 text-xs no-wrap"):
            if isinstance(attachment, FileAttachment):
                ui.icon("description").classes("text-sm")
                ui.label(attachment.name)
            else:
                ui.icon("open_in_new").classes("text-sm")
                ui.link(attachment.url, attachment.url, new_tab=True).classes(
                    "truncate max-w-[200px] text-zinc-400"
                )
            if on_remove is not None:
                ui.button(icon="close", on_click=on_remove).props("flat dense round size=xs")

    def render_message(msg: Message) -> None:
        is_user = msg.role == "user"
        align = "justify-end" if is_user else "justify-start"
        bubble = "message-user" if is_user else "message-assistant"

        with ui.row().classes(f"w-full {align}"):
            with ui.column().classes(f"max-w-[80%] gap-2 px-4 py-3 {bubble}"):
                if msg.attachments:
                    for attachment in msg.attachments:
                        render_attachment_chip(attachment)
                if is_user:
                    content = plain_to_html(msg.content)
                else:
                    content = markdown_to_html(msg.content)
                ui.html(content, sanitize=False).classes("text-sm leading-relaxed break-words")
                ui.label(msg.timestamp.strftime("%I:%M %p")).classes(
                    f"text-[10px] text-zinc-500 {'self-end' if is_user else 'self-start'}"
                )

    def render_typing_indicator() -> None:
        with ui.row().classes("w-full justify-start"):
            with ui.element("div").classes("message-assistant px-4 py-3"):
                with ui.row().classes("items-center gap-2"):
                    with ui.row().classes("gap-1"):
                        for _ in range(3):
                            ui.element("div").classes("typing-dot")
                    ui.label("Thinking...").classes("text-sm text-zinc-400 italic")

    def refresh_messages() -> None:
        messages_container.clear()
        with messages_container:
            if not session.messages:
                with ui.column().classes("w-full h-64 items-center justify-center gap-3"):
                    ui.icon("psychology").classes("text-5xl text-orange-600")
                    ui.label("Hey there! I'm here to help with anything you need").classes(
                        "text-sm font-light text-white/40"
                    )
            else:
                for msg in session.messages:
                    render_message(msg)
            if session.is_loading:
                render_typing_indicator()

    def refresh_attachments() -> None:
        attachments_row.clear()
        with attachments_row:
            for index, attachment in enumerate(session.pending_attachments):
                render_attachment_chip(
                    attachment, on_remove=lambda i=index: remove_attachment(i)
                )

    def on_state_change(state: SessionState) -> None:
        if state is SessionState.SENDING:
            send_btn.disable()
            model_select.disable()
        elif state is SessionState.IDLE:
            send_btn.enable()
            model_select.enable()
        refresh_messages()
        refresh_attachments()

    session = ChatSession(on_alert=show_alert, on_change=on_state_change)

    def remove_attachment(index: int) -> None:
        session.remove_attachment(index)
        refresh_attachments()

    async def send_message() -> None:
        session.draft = input_field.value or ""
        if not session.can_submit():
            return
        input_field.value = ""
        await session.submit()

    async def handle_upload(e: events.UploadEventArguments) -> None:
        data = await e.file.read()
        await session.add_file_attachment(e.file.name, data)
        upload.reset()
        refresh_attachments()

    async def fetch_url(url: str, dialog: ui.dialog) -> None:
        dialog.close()
        await session.add_url_attachment(url)
        refresh_attachments()

    def open_url_dialog() -> None:
        with ui.dialog() as dialog, ui.card().classes("bg-zinc-900 text-white w-96"):
            ui.label("Enter a URL to fetch content from:").classes("text-sm")
            url_input = ui.input(placeholder="https://").classes("w-full")
            with ui.row().classes("w-full justify-end"):
                ui.button("Cancel", on_click=dialog.close).props("flat color=grey")
                ui.button(
                    "Fetch", on_click=lambda: fetch_url(url_input.value or "", dialog)
                ).props("flat color=orange")
        dialog.open()

    def new_chat() -> None:
        input_field.value = ""
        session.reset()

    # === UI Layout ===
    with ui.column().classes("w-full max-w-4xl mx-auto min-h-screen p-4 justify-center"):
        with ui.row().classes("w-full justify-end"):
            ui.button(icon="add", on_click=new_chat).props("flat round color=white")

        with ui.scroll_area().classes("w-full h-[60vh]"):
            messages_container = ui.column().classes("w-full gap-4")

        with ui.column().classes("w-full input-box px-4 py-3 gap-2"):
            attachments_row = ui.row().classes("w-full gap-2")
            input_field = (
                ui.textarea(placeholder="Type a message...")
                .props("autogrow borderless dense rows=1 dark")
                .classes("w-full text-white")
                .on("keydown.enter.exact.prevent", send_message)
            )
            upload = ui.upload(on_upload=handle_upload, auto_upload=True).props(
                "accept=* hide-upload-btn"
            ).classes("hidden")

            with ui.row().classes("w-full items-center justify-between"):
                with ui.row().classes("items-center gap-2"):
                    ui.button(icon="link", on_click=open_url_dialog).props(
                        "flat round color=grey-5"
                    ).bind_enabled_from(session, "is_fetching_url", backward=lambda v: not v)
                    model_select = ui.select(
                        model_options(), value=session.selected_model,
                        on_change=lambda e: session.select_model(e.value),
                    ).props("dense outlined rounded dark options-dark").classes("min-w-[200px]")
                with ui.row().classes("items-center gap-2"):
                    ui.button(
                        icon="folder", on_click=lambda: upload.run_method("pickFiles")
                    ).props("flat round color=grey-5")
                    send_btn = ui.button(icon="send", on_click=send_message).props(
                        "round unelevated color=orange-8"
                    )

    refresh_messages()


def main() -> None:
    ui.run(title="Chat Relay", port=8080, reload=False, dark=True)


if __name__ == "__main__":
    main()
