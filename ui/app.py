"Gradio Search UI"

import logging
from pathlib import Path
from typing import Optional

import gradio as gr

from chub import (
    CharacterDownloader,
    CharacterSearch,
    ChubClient,
    ContentKind,
    Debouncer,
    DirectoryIngestor,
    PageTrigger,
    SearchSession,
    SettingsStore,
    SortField,
    resolve_page,
)
from chub.models import SORT_LABELS

from .render import CUSTOM_CSS, CUSTOM_HEAD, notice_text, render_results, render_search, result_choices

logger = logging.getLogger(__name__)


class GradioNotifier:
    """Gradio 토스트 알림 (오류는 ❌ 표시로 경고와 구분)"""

    def info(self, message: str, title: str = "", action_url: Optional[str] = None):
        gr.Info(notice_text("info", message, title, action_url))

    def warning(self, message: str, title: str = "", action_url: Optional[str] = None):
        gr.Warning(notice_text("warning", message, title, action_url))

    def error(self, message: str, title: str = "", action_url: Optional[str] = None):
        gr.Warning(notice_text("error", message, title, action_url))


# (옵션명, 라벨, placeholder, 설명)
TEXT_INPUTS = [
    ("search_term", "🔍", "Full-text search...", "Search name, description, tags etc."),
    ("name_like", "👤", "Name contains...", "Search only character names"),
    ("include_tags", "➕", "Include tags (comma separated)", "Tags the character MUST have"),
    ("exclude_tags", "➖", "Exclude tags (comma separated)", "Tags the character must NOT have"),
]

NUMBER_INPUTS = [
    ("min_tokens", "Min Tokens", "Minimum character definition tokens"),
    ("max_tokens", "Max Tokens", "Maximum character definition tokens"),
    ("min_tags", "Min Tags", "Minimum number of tags"),
    ("min_users_chatted", "Min Chats", "Minimum users chatted count"),
    ("max_days_ago", "Max Days Ago", "Maximum age of character (in days)"),
    ("min_ai_rating", "Min AI Rating", "Minimum AI Content Rating (0-100)"),
]

FLAG_INPUTS = [
    ("nsfw", "NSFW", "Include Not Safe For Work content"),
    ("nsfl", "NSFL", "Include Not Safe For Life content (Gore, etc.)"),
    ("nsfw_only", "NSFW Only", "ONLY include NSFW content"),
    ("require_images", "Need Images", "Require characters to have gallery images"),
    ("require_example_dialogues", "Need Examples", "Require characters to have example dialogues"),
    ("require_alternate_greetings", "Need Greetings", "Require characters to have alternate greetings"),
    ("require_custom_prompt", "Need Prompt", "Require characters to have a custom main/NSFW prompt"),
    ("require_expressions", "Need Expressions", "Require characters to have an expression pack"),
    ("require_lore", "Need Lore", "Require characters to have any lorebook (linked or embedded)"),
    ("require_lore_embedded", "Need Emb. Lore", "Require characters to have an embedded lorebook"),
    ("require_lore_linked", "Need Link. Lore", "Require characters to have a linked lorebook"),
    ("recommended_verified", "Rec. & Verified", "Only show Recommended or Verified characters"),
    ("include_forks", "Include Forks", "Include forked versions of characters (uncheck for originals only)"),
]


def create_ui(
    data_dir: Path = Path("data"),
    search_url: Optional[str] = None,
    host_url: Optional[str] = None,
) -> gr.Blocks:
    """Gradio UI 생성"""

    settings = SettingsStore(data_dir / "settings.json")
    ingestor = DirectoryIngestor(data_dir / "imports")
    debouncer = Debouncer()

    def open_client() -> ChubClient:
        return ChubClient(search_url=search_url, host_url=host_url)

    form_keys: list[str] = []
    form_inputs: list[gr.components.Component] = []

    def add(key: str, component):
        form_keys.append(key)
        form_inputs.append(component)
        return component

    with gr.Blocks(
        title="Chub Search",
        theme=gr.themes.Base(primary_hue="indigo", radius_size="lg"),
        css=CUSTOM_CSS,
        head=CUSTOM_HEAD,
    ) as app:
        session_state = gr.State(SearchSession())

        results_output = gr.HTML(value=render_results(SearchSession()))

        with gr.Row():
            import_choice = gr.Dropdown(
                label="Import Character",
                choices=[],
                allow_custom_value=True,
                scale=4,
            )
            import_button = gr.Button("☁️ Import", scale=1)
            clear_button = gr.Button("Clear", scale=1)

        text_boxes = {}
        for key, label, placeholder, info in TEXT_INPUTS:
            with gr.Row():
                text_boxes[key] = add(key, gr.Textbox(label=label, placeholder=placeholder, info=info, scale=4))
                if key == "include_tags":
                    add(
                        "inclusive_or",
                        gr.Checkbox(
                            label="OR",
                            value=settings["inclusive_or"],
                            info="If checked, match ANY included tag (OR). If unchecked, match ALL (AND).",
                            scale=1,
                        ),
                    )

        with gr.Accordion("Filters & Requirements", open=False):
            with gr.Row():
                number_boxes = [
                    add(key, gr.Number(label=label, info=info, value=None, precision=0, minimum=0))
                    for key, label, info in NUMBER_INPUTS
                ]
            with gr.Row():
                for key, label, info in FLAG_INPUTS:
                    add(key, gr.Checkbox(label=label, info=info, value=settings[key]))
            language_box = add(
                "language",
                gr.Textbox(label="Language", placeholder="e.g., en, ja", info="Filter by language code (ISO 639-1)"),
            )

        with gr.Accordion("Sorting & Pagination", open=False):
            with gr.Row():
                add(
                    "sort_field",
                    gr.Dropdown(
                        label="Sort By",
                        choices=[(label, field.value) for field, label in SORT_LABELS.items()],
                        value=SortField.DOWNLOAD_COUNT.value,
                    ),
                )
                add("sort_ascending", gr.Checkbox(label="Ascending", value=False))
                add(
                    "page_size",
                    gr.Number(label="Per Page", value=settings["findCount"], precision=0, minimum=1, maximum=100),
                )
            with gr.Row():
                page_down = gr.Button("◀", scale=1)
                page_number = gr.Number(label="Page", value=1, precision=0, minimum=1, scale=2)
                page_up = gr.Button("▶", scale=1)

        search_button = gr.Button("🔍 Search", variant="primary")

        outputs = [session_state, results_output, page_number, import_choice]

        async def run_search(trigger: PageTrigger, session: SearchSession, page, values):
            debouncer.cancel(id(session))
            raw = dict(zip(form_keys, values))
            raw["page_number"] = resolve_page(page, trigger)

            async with open_client() as client:
                searcher = CharacterSearch(client, GradioNotifier(), settings)
                async for results_html in render_search(searcher, raw, session):
                    yield (
                        session,
                        results_html,
                        raw["page_number"],
                        gr.update(choices=result_choices(session), value=None),
                    )

        def handler(trigger: PageTrigger):
            async def _handle(session, page, *values):
                async for frame in run_search(trigger, session, page, values):
                    yield frame

            return _handle

        async def debounced(session, page, *values):
            if not await debouncer.settle(id(session)):
                yield session, gr.update(), gr.update(), gr.update()
                return
            async for frame in run_search(PageTrigger.FILTER, session, page, values):
                yield frame

        inputs = [session_state, page_number, *form_inputs]
        immediate = dict(inputs=inputs, outputs=outputs, concurrency_limit=None)

        # 키 입력은 디바운스, 엔터/버튼/체크박스는 즉시
        for box in [*text_boxes.values(), language_box, *number_boxes]:
            box.input(fn=debounced, show_progress="hidden", **immediate)
            box.submit(fn=handler(PageTrigger.FILTER), **immediate)

        for key, component in zip(form_keys, form_inputs):
            if isinstance(component, (gr.Checkbox, gr.Dropdown)) or key == "page_size":
                component.input(fn=handler(PageTrigger.FILTER), **immediate)

        search_button.click(fn=handler(PageTrigger.FILTER), **immediate)
        page_up.click(fn=handler(PageTrigger.NEXT), **immediate)
        page_down.click(fn=handler(PageTrigger.PREV), **immediate)
        page_number.submit(fn=handler(PageTrigger.PAGE), **immediate)

        async def import_selected(full_path: Optional[str]):
            async with open_client() as client:
                downloader = CharacterDownloader(
                    client,
                    GradioNotifier(),
                    {ContentKind.CHARACTER: ingestor},
                )
                file = await downloader.download(full_path or "")
            if file:
                gr.Info(f"Imported {file.filename}")

        import_button.click(fn=import_selected, inputs=[import_choice], outputs=[])

        def clear(session: SearchSession):
            session.clear()
            return session, render_results(session), 1, gr.update(choices=[], value=None)

        clear_button.click(fn=clear, inputs=[session_state], outputs=outputs)

    return app


def launch_ui(data_dir: Path = Path("data"), share: bool = False, port: int = 7860, **kwargs):
    """UI 실행"""
    app = create_ui(data_dir=data_dir, **kwargs)
    app.launch(server_name="0.0.0.0", server_port=port, share=share)
