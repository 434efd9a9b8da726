"""검색 결과 HTML 렌더링"""

import html
from typing import Any, AsyncIterator, Mapping, Optional

from chub.models import CharacterRecord
from chub.session import SearchSession

MAX_CARD_TAGS = 8
EMPTY_BEFORE_SEARCH = "Perform a search to see characters."
EMPTY_AFTER_SEARCH = "No characters found for the specified criteria."


CUSTOM_CSS = """
:root {
    --color-card-bg: #ffffff;
    --color-text-main: #111827;
    --color-text-sub: #4b5563;
    --color-text-muted: #9ca3af;
    --color-primary: #4f46e5;
    --color-primary-light: #eef2ff;
    --shadow-card: 0 1px 3px rgba(0,0,0,0.1), 0 1px 2px rgba(0,0,0,0.06);
    --radius-card: 12px;
}

.dark {
    --color-card-bg: #1f2937;
    --color-text-main: #f9fafb;
    --color-text-sub: #d1d5db;
    --color-text-muted: #6b7280;
    --color-primary: #818cf8;
    --color-primary-light: #312e81;
}

.chub-list { display: flex; flex-direction: column; gap: 0.75rem; }
.chub-list.searching { opacity: 0.6; cursor: wait; pointer-events: none; }

.chub-card {
    display: flex;
    gap: 1rem;
    padding: 0.75rem;
    background: var(--color-card-bg);
    border-radius: var(--radius-card);
    box-shadow: var(--shadow-card);
}

.chub-thumbnail {
    width: 60px;
    height: 80px;
    object-fit: cover;
    border-radius: 6px;
    flex-shrink: 0;
    cursor: zoom-in;
}
.chub-thumbnail-empty { background: #eee; cursor: default; }

.chub-info { flex: 1; min-width: 0; display: flex; flex-direction: column; gap: 3px; }
.chub-name { font-weight: 600; color: var(--color-text-main); text-decoration: none; }
.chub-name:hover { color: var(--color-primary); }
.chub-author { font-size: 0.85em; color: var(--color-text-muted); text-decoration: none; }
.chub-description {
    font-size: 0.9em;
    color: var(--color-text-sub);
    display: -webkit-box;
    -webkit-line-clamp: 2;
    -webkit-box-orient: vertical;
    overflow: hidden;
}
.chub-tags { display: flex; flex-wrap: wrap; gap: 4px; margin-top: 4px; }
.chub-tag {
    font-size: 0.75rem;
    padding: 0.1rem 0.5rem;
    border-radius: 9999px;
    background: var(--color-primary-light);
    color: var(--color-primary);
}
.chub-path { font-size: 0.75rem; color: var(--color-text-muted); font-family: monospace; }

.chub-empty { text-align: center; padding: 2rem 1rem; color: var(--color-text-muted); }

#chub-zoom {
    position: fixed;
    inset: 0;
    background: rgba(0, 0, 0, 0.7);
    z-index: 9999;
    display: none;
    align-items: center;
    justify-content: center;
    cursor: zoom-out;
}
#chub-zoom.active { display: flex; }
#chub-zoom img { max-width: 80vw; max-height: 80vh; border: 2px solid white; border-radius: 5px; }
"""

# 썸네일 클릭 시 확대, 아무 곳이나 클릭하면 닫힘
CUSTOM_HEAD = """
<script>
window.chubZoom = function(img) {
    let overlay = document.getElementById('chub-zoom');
    if (!overlay) {
        overlay = document.createElement('div');
        overlay.id = 'chub-zoom';
        overlay.appendChild(document.createElement('img'));
        overlay.addEventListener('click', function() { overlay.classList.remove('active'); });
        document.body.appendChild(overlay);
    }
    const zoomed = overlay.querySelector('img');
    if (overlay.classList.contains('active') && zoomed.src === img.src) {
        overlay.classList.remove('active');
        return;
    }
    zoomed.src = img.src;
    overlay.classList.add('active');
};
document.addEventListener('keydown', function(e) {
    const overlay = document.getElementById('chub-zoom');
    if (e.key === 'Escape' && overlay) overlay.classList.remove('active');
});
</script>
"""


def render_card(record: CharacterRecord) -> str:
    name = html.escape(record.name)
    author = html.escape(record.author)

    if record.has_image:
        img_html = (
            f'<img class="chub-thumbnail" src="{html.escape(record.image_url)}" '
            f'loading="lazy" alt="{name}" onclick="chubZoom(this)">'
        )
    else:
        img_html = '<div class="chub-thumbnail chub-thumbnail-empty"></div>'

    tags_html = "".join(
        f'<span class="chub-tag">{html.escape(tag)}</span>' for tag in record.tags[:MAX_CARD_TAGS]
    )

    return f"""
    <div class="chub-card">
        {img_html}
        <div class="chub-info">
            <a class="chub-name" href="{html.escape(record.page_url)}" target="_blank"
               title="View on Chub.ai: {name}">{name}</a>
            <a class="chub-author" href="{html.escape(record.author_url)}" target="_blank"
               title="View author on Chub.ai: {author}">by {author}</a>
            <div class="chub-description">{html.escape(record.description)}</div>
            <div class="chub-tags">{tags_html}</div>
            <div class="chub-path">{html.escape(record.full_path)}</div>
        </div>
    </div>
    """


def render_results(session: SearchSession, searching: bool = False) -> str:
    """현재 세션 결과 -> HTML"""
    classes = "chub-list searching" if searching or session.searching else "chub-list"

    if not session.results:
        message = EMPTY_AFTER_SEARCH if session.searched else EMPTY_BEFORE_SEARCH
        return f'<div class="{classes}"><div class="chub-empty">{message}</div></div>'

    cards = "".join(render_card(record) for record in session.results)
    return f'<div class="{classes}">{cards}</div>'


async def render_search(searcher, raw: Mapping[str, Any], session: SearchSession) -> AsyncIterator[str]:
    """검색 중 화면, 완료 화면을 차례로 생성"""
    yield render_results(session, searching=True)
    await searcher.search(raw, session, remember=True)
    yield render_results(session)


def result_choices(session: SearchSession) -> list[tuple[str, str]]:
    """가져오기 드롭다운 선택지 (표시명, fullPath)"""
    return [(f"{r.name} · by {r.author}", r.full_path) for r in session.results]


NOTICE_ICONS = {"info": "ℹ️", "warning": "⚠️", "error": "❌"}


def notice_text(level: str, message: str, title: str = "", action_url: Optional[str] = None) -> str:
    """토스트 문구

    ("error", "boom", "API Error") -> "❌ API Error: boom"
    """
    text = f"{NOTICE_ICONS[level]} {title}: {message}" if title else f"{NOTICE_ICONS[level]} {message}"
    if action_url:
        text += f" → {action_url}"
    return text
